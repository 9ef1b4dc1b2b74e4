"""Exceptions raised by the EMI calculator."""

from typing import List


class InvalidLoanInputs(ValueError):
    """Raised in strict mode when loan inputs violate the input contract.

    ``problems`` lists one message per violated constraint.
    """

    def __init__(self, problems: List[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))
