"""
Contains functionality to analyze the result of a batch validation
"""
import itertools
from typing import Optional

from .context import ValidationContext


def _extract_field(error: tuple[str, str]) -> str:
    return error[0]


class ValidationResult:
    """
    The function `ValidationManager.validate` will return an instance of this class. It holds one context per
    validated input map (in the order of the input maps) and provides properties for further analysis of the
    collected errors. Note that the values are calculated only if you use them - this saves some CPU time if you are
    only interested in e.g. the succeeding contexts.
    """

    def __init__(self, contexts: list[ValidationContext]):
        self._contexts = contexts

        self._succeeded_contexts: Optional[list[ValidationContext]] = None
        self._failed_contexts: Optional[list[ValidationContext]] = None
        self._errors: Optional[list[tuple[str, str]]] = None
        self._num_errors_per_field: Optional[dict[str, int]] = None

    def _determine_succeeds(self):
        """Splits the contexts into succeeded and failed ones"""
        self._succeeded_contexts = []
        self._failed_contexts = []
        for context in self._contexts:
            if len(context.errors) > 0:
                self._failed_contexts.append(context)
            else:
                self._succeeded_contexts.append(context)

    @property
    def contexts(self) -> list[ValidationContext]:
        """All contexts, one per validated input map"""
        return self._contexts

    @property
    def succeeded_contexts(self) -> list[ValidationContext]:
        """List of contexts which got validated without any errors"""
        if self._succeeded_contexts is None:
            self._determine_succeeds()
            assert self._succeeded_contexts is not None
        return self._succeeded_contexts

    @property
    def failed_contexts(self) -> list[ValidationContext]:
        """List of contexts which hold at least one error"""
        if self._failed_contexts is None:
            self._determine_succeeds()
            assert self._failed_contexts is not None
        return self._failed_contexts

    @property
    def total(self) -> int:
        """Number of all validated input maps"""
        return len(self._contexts)

    @property
    def num_succeeds(self) -> int:
        """Number of positively validated input maps (equivalent to `len(self.succeeded_contexts)`)"""
        return len(self.succeeded_contexts)

    @property
    def num_fails(self) -> int:
        """Number of negatively validated input maps (equivalent to `len(self.failed_contexts)`)"""
        return len(self.failed_contexts)

    @property
    def all_errors(self) -> list[tuple[str, str]]:
        """
        This is a complete list of all (field, message) pairs from all validated input maps.
        It is sorted by the field name to enable grouping by it using itertools.
        """
        if self._errors is None:
            self._errors = sorted(
                itertools.chain.from_iterable(context.errors.items() for context in self.failed_contexts),
                key=_extract_field,
            )
        return self._errors

    @property
    def num_errors_total(self) -> int:
        """Number of errors from all input maps in total"""
        return len(self.all_errors)

    @property
    def num_errors_per_field(self) -> dict[str, int]:
        """
        This is a dictionary which maps the field name to the number of input maps in which this field has an error.
        """
        if self._num_errors_per_field is None:
            self._num_errors_per_field = {
                key: sum(1 for _ in values_iter)
                for key, values_iter in itertools.groupby(self.all_errors, key=_extract_field)
            }
        return self._num_errors_per_field
