import io

import barcode
from barcode.writer import SVGWriter

WRITER_OPTIONS = {'module_width': 0.2, 'module_height': 15.0, 'font_size': 10, 'text_distance': 5, 'quiet_zone': 2}


def render_barcode_svg(value):
    """Code128 label for ``value`` as SVG bytes."""
    if not value:
        raise ValueError('barcode value is empty')
    code = barcode.get('code128', value, writer=SVGWriter())
    output = io.BytesIO()
    code.write(output, options=WRITER_OPTIONS)
    return output.getvalue()
