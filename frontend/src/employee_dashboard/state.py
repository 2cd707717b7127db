"""Dashboard view state."""

from dataclasses import dataclass, field
from typing import Literal

Section = Literal["dashboard", "employees", "search", "reports"]
ModalMode = Literal["closed", "add", "edit"]
Theme = Literal["light", "dark"]

SECTIONS: tuple[Section, ...] = ("dashboard", "employees", "search", "reports")


@dataclass
class ViewState:
    """Everything the dashboard needs to re-derive its current view.

    Only ``DashboardController`` transitions mutate it.
    """

    section: Section = "dashboard"
    modal: ModalMode = "closed"
    editing_id: int | None = None

    page: int = 0
    page_size: int = 10
    sort_field: str = "id"
    sort_direction: str = "asc"
    last_page: bool = True

    quick_search: str = ""
    department_filter: str = ""
    status_filter: str = ""

    departments: set[str] = field(default_factory=set)
    theme: Theme = "light"

    @property
    def modal_open(self) -> bool:
        return self.modal != "closed"

