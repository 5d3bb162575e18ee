from PySide6.QtWidgets import QTableView

class TableView(QTableView):
    """Read-only, single-row selection table used by every list screen."""

    def __init__(self, parent=None, sortable: bool = True):
        super().__init__(parent)
        self.setSortingEnabled(sortable)
        self.setAlternatingRowColors(True)
        self.setSelectionBehavior(QTableView.SelectRows)
        self.setSelectionMode(QTableView.SingleSelection)
        self.setEditTriggers(QTableView.NoEditTriggers)
        self.verticalHeader().setVisible(False)
        self.horizontalHeader().setStretchLastSection(True)

    def selected_row(self) -> int | None:
        sm = self.selectionModel()
        if sm is None:
            return None
        rows = sm.selectedRows()
        return rows[0].row() if rows else None
