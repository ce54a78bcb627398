"""Utilities module initialization"""

from shoppro_pos.utils.formatting import format_money, round_money, short_sale_id

__all__ = ["format_money", "round_money", "short_sale_id"]
