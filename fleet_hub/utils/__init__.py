from .text import hash_string, interpolate, iso_timestamp, pick, title_case, word_count

__all__ = ["hash_string", "interpolate", "iso_timestamp", "pick", "title_case", "word_count"]
