"""Application services package."""
from .input_normalizer import normalize_input
from .quota_service import check_and_reserve
from .response_parser import parse_cards, parse_reviewer, recover_json
from .result_assembler import assemble_cards, assemble_reviewer

__all__ = [
    "normalize_input",
    "check_and_reserve",
    "parse_cards",
    "parse_reviewer",
    "recover_json",
    "assemble_cards",
    "assemble_reviewer",
]
