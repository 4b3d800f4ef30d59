from app.utils.dates import get_now, to_epoch_ms
from app.utils.slugs import slugify, unique_slug
