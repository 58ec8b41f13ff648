"""Constants for the content line parser."""

FOLD = r"\r?\n[ \t]"
FOLD_LEN = 75
FOLD_INDENT = " "
ATTR_BEGIN = "BEGIN"
ATTR_END = "END"
ATTR_VALUE = "VALUE"
ATTR_TZID = "TZID"

ATTR_BEGIN_LOWER = "begin"
ATTR_END_LOWER = "end"
