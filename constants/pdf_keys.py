"""
PDF Dictionary Keys and Name Constants
"""

# Resource Dictionary Keys
KEY_RESOURCES = "/Resources"
KEY_FONT = "/Font"

# Font Dictionary Keys
KEY_TYPE = "/Type"
KEY_SUBTYPE = "/Subtype"
KEY_BASE_FONT = "/BaseFont"
KEY_ENCODING = "/Encoding"

# Font Dictionary Values
VAL_FONT = "/Font"
VAL_TYPE1 = "/Type1"
VAL_WIN_ANSI_ENCODING = "/WinAnsiEncoding"

# Prefix for font resources added by the group writer
GENERATED_FONT_PREFIX = "/FPara"

# Text encoding matching WinAnsiEncoding
WIN_ANSI_CODEC = "cp1252"
