"""
HTML rendering for the index page.
"""

from html import escape

from data_models import RenderModel

UNKNOWN_LOCATION_TEXT = "Could not get location"

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>Where am I? {title}</title>
  <style>
    body {{ font-family: sans-serif; margin: 0; text-align: center; color: #222; }}
    h1 {{ margin-top: 2em; }}
    .country {{ color: #666; }}
    img {{ max-width: 90vw; max-height: 70vh; margin-top: 1em; }}
  </style>
</head>
<body>
  <h1>{city}, {area}</h1>
  <p class="country">{country} ({country_code})</p>
{image}</body>
</html>
"""

IMAGE_TEMPLATE = """  <img src="{url}" alt="{alt}">
"""


def render_index(model: RenderModel) -> str:
    """Full HTML document for a resolved location. All values are escaped."""
    geo = model.geo
    image = ""
    if model.image.is_found:
        image = IMAGE_TEMPLATE.format(url=escape(model.image.url), alt=escape(geo.search_string()))

    return PAGE_TEMPLATE.format(
        title=escape(geo.search_string()),
        city=escape(geo.city),
        area=escape(geo.region_name or geo.country),
        country=escape(geo.country),
        country_code=escape(geo.country_code),
        image=image,
    )
