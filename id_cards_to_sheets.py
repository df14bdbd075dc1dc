#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Render ID card records onto printable sheets.
"""

import id_card_sheets.cli


if __name__ == "__main__":
	id_card_sheets.cli.main()
