"""Text scoring, normalization and link mining."""

from .quality import TextQualityScorer
from .text_normalizer import clean_text
from .link_miner import LinkMiner, claimed_by, clean_url, ensure_https, mine_links

__all__ = ['TextQualityScorer', 'clean_text', 'LinkMiner', 'claimed_by', 'clean_url', 'ensure_https', 'mine_links']
