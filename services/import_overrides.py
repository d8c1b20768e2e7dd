"""
Operator action overrides for an import preview.

Kept apart from the validation results: changing an action never touches
errors, warnings or duplicate classification.
"""

from typing import Iterable, Optional
import structlog

from exceptions import ImportRowNotFoundError, InvalidImportActionError
from models.product_import import ImportAction, ValidatedProduct

logger = structlog.get_logger(__name__)


class ActionOverrideStore:
    """
    Per-row action overrides keyed by 1-based row number.

    Usage:
        overrides = ActionOverrideStore(results)
        overrides.set(3, ImportAction.UPDATE)
        overrides.effective_action(results[2])  # ImportAction.UPDATE
    """

    def __init__(self, results: Iterable[ValidatedProduct]):
        self._results = {result.row: result for result in results}
        self._actions: dict[int, ImportAction] = {}

    def set(self, row: int, action: ImportAction) -> ImportAction:
        """
        Override one row's action.

        Raises:
            ImportRowNotFoundError: Row number not in this import
            InvalidImportActionError: UPDATE on a row with no catalog match
        """
        result = self._results.get(row)
        if result is None:
            raise ImportRowNotFoundError(row)

        action = ImportAction(action)
        if action is ImportAction.UPDATE and not result.existing_product_id:
            raise InvalidImportActionError(
                row=row,
                action=action.value,
                reason="Row does not match an existing catalog product"
            )

        self._actions[row] = action
        logger.debug("import_action_overridden", row=row, action=action.value)
        return action

    def clear(self, row: int) -> None:
        """Drop the override so the row falls back to its default action."""
        if row not in self._results:
            raise ImportRowNotFoundError(row)
        self._actions.pop(row, None)

    def get(self, row: int) -> Optional[ImportAction]:
        """Override for a row, or None if the operator has not chosen one."""
        return self._actions.get(row)

    def effective_action(self, result: ValidatedProduct) -> ImportAction:
        """Override if present, else the validator's default."""
        return self._actions.get(result.row, result.default_action)

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, row: int) -> bool:
        return row in self._actions
