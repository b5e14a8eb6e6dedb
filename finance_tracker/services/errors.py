# finance_tracker/services/errors.py
import enum


class LifecycleError(str, enum.Enum):
    """Failure reasons returned (not raised) by the lifecycle services."""

    not_found = "not_found"
    immutable_default = "immutable_default"
    category_not_found = "category_not_found"
    type_mismatch = "type_mismatch"
    default_category_missing = "default_category_missing"
    invariant_violation = "invariant_violation"

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_MESSAGES = {
    LifecycleError.not_found: "Not found.",
    LifecycleError.immutable_default: "The default category cannot be edited or deleted.",
    LifecycleError.category_not_found: "Category not found or unauthorized.",
    LifecycleError.type_mismatch: "Category type does not match transaction type.",
    LifecycleError.default_category_missing: "Default category not found.",
    LifecycleError.invariant_violation: "Default category not found for user. Cannot reassign transactions.",
}
