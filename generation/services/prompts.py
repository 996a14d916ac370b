"""
Prompts par style. La variante 'photo' accompagne l'image envoyée au provider,
la variante 'text' est suivie de la description saisie par l'utilisateur.
"""
from billing.services.pricing import MODE_PHOTO

STYLE_NOTION = "notion"
STYLE_GHIBLI = "ghibli"
STYLE_OIL_PAINTING = "oil_painting"
STYLE_CHOICES = [STYLE_NOTION, STYLE_GHIBLI, STYLE_OIL_PAINTING]
DEFAULT_STYLE = STYLE_NOTION

PROMPTS = {
    STYLE_NOTION: {
        "photo": (
            "Transform this photo into a minimalist black-and-white avatar illustration with these exact characteristics:\n"
            "- Pure black and white color scheme only\n"
            "- Simple black outline strokes for facial contours\n"
            "- Solid black fill for hair (no gradients, no strokes)\n"
            "- Minimalist facial features: simple shapes for eyes, single line for nose, simple curve for mouth\n"
            "- Pure white background (#ffffff) - MUST be solid white, no other colors, no gradients, no transparency\n"
            "- Cartoon proportions with slightly larger head\n"
            "- Completely flat design with NO shadows or gradients\n"
            "- Slight hand-drawn imperfection in lines\n"
            "- Head and shoulders composition only\n"
            "- Keep the person's key facial features recognizable but simplified"
        ),
        "text": (
            "Generate a minimalist black-and-white portrait illustration based on this description:\n"
            "- Pure black and white color scheme only\n"
            "- Simple black outline strokes for facial contours\n"
            "- Solid black fill for hair (no gradients)\n"
            "- Minimalist facial features: simple shapes for eyes, single line for nose, simple curve for mouth\n"
            "- Pure white background (#ffffff) - MUST be solid white, no other colors, no gradients, no transparency\n"
            "- Cartoon proportions with slightly larger head\n"
            "- Completely flat design with NO shadows or gradients\n"
            "- Slight hand-drawn imperfection in lines\n"
            "- Head and shoulders composition only\n\n"
            "User description: "
        ),
    },
    STYLE_GHIBLI: {
        "photo": (
            "Transform this photo into a Studio Ghibli style anime character. Key characteristics:\n"
            "- Hand-drawn anime aesthetic similar to Miyazaki films\n"
            "- Soft, vibrant colors and lush palette\n"
            "- Expressive, wide eyes typical of the style\n"
            "- Detailed, painterly hair and clothes\n"
            "- Simple but atmospheric background (sky blue or grassy green tones)\n"
            "- Gentle lighting and shading\n"
            "- Whimsical and charming feel\n"
            "- Head and shoulders composition\n"
            "- Keep the person's key facial features recognizable but stylized"
        ),
        "text": (
            "Generate a Studio Ghibli style anime character portrait based on this description:\n"
            "- Hand-drawn anime aesthetic similar to Miyazaki films\n"
            "- Soft, vibrant colors and lush palette\n"
            "- Expressive, wide eyes\n"
            "- Detailed, painterly hair and clothes\n"
            "- Simple but atmospheric background\n"
            "- Gentle lighting and shading\n"
            "- Whimsical and charming feel\n"
            "- Head and shoulders composition\n\n"
            "User description: "
        ),
    },
    STYLE_OIL_PAINTING: {
        "photo": (
            "Transform this photo into a classic oil painting portrait. Key characteristics:\n"
            "- Visible brush strokes and rich texture\n"
            "- Deep, resonant colors and tonal depth\n"
            "- Classical lighting (chiaroscuro) with dramatic shadows\n"
            "- Realistic proportions but painterly execution\n"
            "- Canvas texture effect\n"
            "- Elegant and timeless look\n"
            "- Neutral, dark, or textured background appropriate for a portrait\n"
            "- Head and shoulders composition\n"
            "- Maintain resemblance but with artistic interpretation"
        ),
        "text": (
            "Generate a classic oil painting portrait based on this description:\n"
            "- Visible brush strokes and rich texture\n"
            "- Deep, resonant colors and tonal depth\n"
            "- Classical lighting (chiaroscuro)\n"
            "- Realistic proportions but painterly execution\n"
            "- Canvas texture effect\n"
            "- Elegant and timeless look\n"
            "- Neutral, dark, or textured background\n"
            "- Head and shoulders composition\n\n"
            "User description: "
        ),
    },
}


def get_prompt(style: str, mode: str) -> str:
    config = PROMPTS.get(style) or PROMPTS[DEFAULT_STYLE]
    return config["photo"] if mode == MODE_PHOTO else config["text"]
