# Input validation helpers
# Each validator returns (is_valid, message) so callers decide how to report it

import re
from urllib.parse import urlsplit

USERNAME_RE = re.compile(r'^[a-zA-Z0-9_]+$')
EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
COLOR_RE = re.compile(r'^#(?:[0-9a-fA-F]{3}){1,2}$')
DEFAULT_TAG_COLOR = '#e0e7ff'
MAX_BIO_LENGTH = 160


def validate_username(username):
    # Validate username format and length
    if not isinstance(username, str) or len(username) < 3:
        return False, "username must be at least 3 characters long"

    if len(username) > 30:
        return False, "username must be at most 30 characters long"

    # Only alphanumeric and underscores
    if not USERNAME_RE.match(username):
        return False, "username can only contain letters, numbers, and underscores"

    return True, ""


def validate_email(email):
    if not isinstance(email, str) or not EMAIL_RE.match(email) or len(email) > 254:
        return False, "valid email is required"
    return True, ""


def validate_password(password):
    # Validate password length
    if not isinstance(password, str) or len(password) < 8:
        return False, "password must be at least 8 characters long"

    if len(password) > 100:
        return False, "password must be less than 100 characters long"

    return True, ""


def validate_name(value, label):
    if not isinstance(value, str) or not value.strip():
        return False, f"{label} is required"
    if len(value.strip()) > 100:
        return False, f"{label} is too long"
    return True, ""


def validate_bio(bio):
    if not isinstance(bio, str):
        return False, "bio must be a string"
    if len(bio.strip()) > MAX_BIO_LENGTH:
        return False, f"bio must be at most {MAX_BIO_LENGTH} characters"
    return True, ""


def validate_url(url):
    # Only absolute http(s) links are accepted
    if not isinstance(url, str) or not url.strip():
        return False, "url is required"
    parts = urlsplit(url.strip())
    if parts.scheme not in ('http', 'https') or not parts.netloc:
        return False, "url must be a valid http(s) link"
    return True, ""


def normalize_genres(genres):
    # List of distinct non-empty strings, first occurrence wins
    if genres is None:
        return []
    if not isinstance(genres, list):
        raise ValueError("genre must be a list")
    result = []
    for genre in genres:
        if not isinstance(genre, str):
            raise ValueError("genre entries must be strings")
        genre = genre.strip()
        if genre and genre not in result:
            result.append(genre)
    return result


def normalize_tags(tags):
    # List of {'text', 'color'} pairs, deduplicated on text
    if tags is None:
        return []
    if not isinstance(tags, list):
        raise ValueError("tags must be a list")
    result = []
    seen = set()
    for tag in tags:
        if isinstance(tag, str):
            tag = {'text': tag}
        if not isinstance(tag, dict):
            raise ValueError("tags entries must be objects with text and color")
        text = str(tag.get('text') or '').strip()
        if not text:
            raise ValueError("tag text is required")
        color = str(tag.get('color') or DEFAULT_TAG_COLOR).strip()
        if not COLOR_RE.match(color):
            raise ValueError(f"invalid tag color: {color}")
        if text.lower() in seen:
            continue
        seen.add(text.lower())
        result.append({'text': text, 'color': color})
    return result
