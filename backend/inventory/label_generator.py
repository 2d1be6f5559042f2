"""
Local stone label generator
Uses PIL/Pillow and python-barcode to render a Code128 label for a stone lot
"""
import io
import base64
import logging
from PIL import Image, ImageDraw, ImageFont
from typing import Optional
import barcode
from barcode.writer import ImageWriter

logger = logging.getLogger(__name__)


def _load_fonts():
    try:
        return (
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf', 14),
            ImageFont.truetype('/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf', 12),
        )
    except (OSError, IOError):
        return ImageFont.load_default(), ImageFont.load_default()


def _draw_centered(draw, width, y, text, font):
    bbox = draw.textbbox((0, 0), text, font=font)
    draw.text(((width - (bbox[2] - bbox[0])) // 2, y), text, fill='black', font=font)


def generate_label_image(
    stone_id: str,
    description: str,
    header: Optional[str] = None,
    price_text: Optional[str] = None,
    width: int = 400,  # 4 inches at 100 DPI
    height: int = 200,  # 2 inches at 100 DPI
) -> str:
    """
    Render a printable stone label.

    Layout, top to bottom: header line (supplier / lab), Code128 barcode of the
    stone id, the stone id in text, then the description with an optional price.

    Returns:
        Base64-encoded PNG image as data URL string
    """
    if len(description) > 34:
        description = description[:34] + '...'

    img = Image.new('RGB', (width, height), color='white')
    draw = ImageDraw.Draw(img)
    font_medium, font_small = _load_fonts()

    margin = 10
    first_line_y = 8
    barcode_y = first_line_y + 18
    barcode_available_height = height - barcode_y - 44

    _draw_centered(draw, width, first_line_y, (header or description)[:40], font_medium)

    last_line_text = description
    if price_text:
        last_line_text += f"  {price_text}"

    try:
        code128 = barcode.get_barcode_class('code128')
        barcode_img = code128(stone_id, writer=ImageWriter()).render({
            'write_text': False,
            'module_width': 0.3,
            'module_height': 20.0,
            'quiet_zone': 2.0,
            'font_size': 0,
            'text_distance': 0,
            'background': 'white',
            'foreground': 'black',
        })

        barcode_img_width, barcode_img_height = barcode_img.size
        barcode_width = width - (2 * margin)
        scale_factor = barcode_width / barcode_img_width
        scaled_height = int(barcode_img_height * scale_factor)
        if scaled_height > barcode_available_height:
            scale_factor = barcode_available_height / barcode_img_height
            scaled_height = barcode_available_height
            barcode_width = int(barcode_img_width * scale_factor)

        barcode_img = barcode_img.resize((barcode_width, scaled_height), Image.Resampling.BILINEAR)
        img.paste(barcode_img, ((width - barcode_width) // 2, barcode_y))

        text_y = barcode_y + scaled_height + 5
        _draw_centered(draw, width, text_y, stone_id, font_small)
        _draw_centered(draw, width, text_y + 16, last_line_text, font_medium)
    except Exception as e:
        # Fall back to a text-only label so printing is never blocked
        logger.error(f"Barcode generation failed for '{stone_id}': {str(e)}")
        _draw_centered(draw, width, barcode_y, f'STONE: {stone_id}', font_small)
        _draw_centered(draw, width, barcode_y + 20, last_line_text, font_medium)

    buffer = io.BytesIO()
    img.save(buffer, format='PNG', optimize=False, compress_level=1)
    image_base64 = base64.b64encode(buffer.getvalue()).decode('utf-8')
    buffer.close()
    img.close()

    return f'data:image/png;base64,{image_base64}'


def generate_stone_label(stone, show_price=False) -> str:
    """Build the label for a Gemstone instance"""
    header_parts = []
    if stone.supplier_id:
        header_parts.append(stone.supplier.name[:20])
    if stone.certified and stone.certificate_lab:
        header_parts.append(f"{stone.certificate_lab} Certified")

    description = f"{stone.type} {stone.carat} ct"
    if stone.origin:
        description += f" {stone.origin}"

    price_text = f"Rs. {stone.selling_price:,.0f}" if show_price else None

    return generate_label_image(
        stone_id=stone.stone_id,
        description=description,
        header=' | '.join(header_parts) or None,
        price_text=price_text,
    )
