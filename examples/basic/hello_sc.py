"""Render an SC document in one call, then read its metadata."""

from scmark import extract_info, render

source = """\\info(title="Hello", date="2020-01-01")
\\section{Greeting}
Hello \\bold{World}
"""

print(render(source))
print(extract_info(source))
