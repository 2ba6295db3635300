"""Errors carry a full diagnostic with file identity and position."""

from scmark import ScError, render

source = "Intro text\n\\item stray item\n"

try:
    render(source, path="site/blog", file_name="post.sc")
except ScError as err:
    print(err, end="")
