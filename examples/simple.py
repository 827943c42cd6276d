import sys

from chord_sheet import dumps, parse_text, transpose_sheet

text = """Title: Paper Boats
Capo: 2

[Verse]
Gm     C
Hello  world
"""
sheet = parse_text(text)

# Access sections
sys.stdout.write(sheet.sections[0].label + "\n")  # "Verse"

# Words carry the chord sung on them
for word in sheet.sections[0].lines[0].words:
    sys.stdout.write(f"{word.chord} -> {word.text}\n")

# Up a whole tone, as JSON
sys.stdout.write(dumps(transpose_sheet(sheet, 2), indent=2) + "\n")
