"""Thread-safe batch rendering: render 1000 docs in parallel."""

from scmark import Converter

docs = [f"\\section{{Doc {i}}}\nContent for document {i}" for i in range(1000)]

convert = Converter(max_tag_depth=16)
results = convert.render_many(docs, max_workers=8)

print(f"Rendered {len(results)} documents in parallel")
print("First doc:", results[0].splitlines()[:4])
