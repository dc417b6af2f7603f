"""Starter .textverify.toml template."""

DEFAULT_TOML = """\
# textverify configuration
version = "1.0"

[normalize]
preserve_chunks = false   # keep blank-line boundaries as separators in the diff

[match]
short_threshold = 0.2     # fuzzy similarity needed for short lines
long_threshold = 0.4      # fuzzy similarity needed for everything else
short_max_len = 5         # lines up to this many characters count as short

[layers]
row_ratio = 0.08          # reading-order row height as a fraction of page height
include_hidden = false

[output]
format = "terminal"       # terminal | json
show_summary = true
show_matches = true
"""
