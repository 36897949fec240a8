import json
import os
import sys

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "backend")))

from auditoiso.schemas.audit import Audit
from auditoiso.services.pdf_generator import PdfGenerator, RenderFailure, attachment_filename


def main():
    if len(sys.argv) != 2:
        print("usage: python debug_report.py <audit.json>")
        sys.exit(2)

    with open(sys.argv[1], "r", encoding="utf-8") as f:
        record = json.load(f)
    record.setdefault("id", "a-debug")
    audit = Audit.model_validate(record)

    generator = PdfGenerator()
    print(generator.render_html(audit))

    try:
        pdf_bytes = generator.generate(audit)
    except RenderFailure as e:
        print(f"Render failed: {e}")
        sys.exit(1)

    filename = attachment_filename(audit)
    with open(filename, "wb") as f:
        f.write(pdf_bytes)
    print(f"PDF generated: {len(pdf_bytes)} bytes -> {filename}")

if __name__ == "__main__":
    main()
