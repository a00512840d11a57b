"""Contract generation and salary bookkeeping."""

from .engine import contract_seasons_remaining, contract_years, gen_contract, set_contract

__all__ = ["contract_seasons_remaining", "contract_years", "gen_contract", "set_contract"]
