"""Qt application entrypoint for the chembalance GUI."""

from __future__ import annotations

import logging
import sys

from PySide6 import QtCore, QtGui, QtWidgets

from chembalance.gui.presentation import LABELS, feedback_text, header_text, term_views
from chembalance.guide import balancing_guide
from chembalance.models import PRODUCT, Language, Topic
from chembalance.session import DrillSession, QuestionState
from chembalance.sources import GeminiQuestionSource, GeminiSettings, QuestionSource

COEFFICIENT_PATTERN = QtCore.QRegularExpression(r"^([1-9][0-9]*)?$")


class DrillWindow(QtWidgets.QMainWindow):
    def __init__(self, source: QuestionSource) -> None:
        super().__init__()
        self.setWindowTitle("chembalance")
        self.resize(1000, 640)
        self.session = DrillSession(source, Topic.METALS, Language.EN)

        central = QtWidgets.QWidget()
        self.setCentralWidget(central)
        layout = QtWidgets.QHBoxLayout(central)

        side_panel = QtWidgets.QWidget()
        side_layout = QtWidgets.QFormLayout(side_panel)
        side_layout.setLabelAlignment(QtCore.Qt.AlignmentFlag.AlignRight)

        self.topic_box = QtWidgets.QComboBox()
        for topic in Topic:
            self.topic_box.addItem(topic.value, topic)
        self.topic_box.currentIndexChanged.connect(self._change_topic)

        self.language_box = QtWidgets.QComboBox()
        for language in Language:
            self.language_box.addItem(language.value, language)
        self.language_box.currentIndexChanged.connect(self._change_language)

        self.guide_label = QtWidgets.QLabel()
        self.guide_label.setWordWrap(True)

        side_layout.addRow("Topic", self.topic_box)
        side_layout.addRow("Language", self.language_box)
        side_layout.addRow(self.guide_label)

        main_panel = QtWidgets.QWidget()
        main_layout = QtWidgets.QVBoxLayout(main_panel)

        self.header_label = QtWidgets.QLabel()
        self.title_label = QtWidgets.QLabel()
        self.equation_row = QtWidgets.QHBoxLayout()
        self.feedback_label = QtWidgets.QLabel()
        self.feedback_label.setWordWrap(True)

        buttons = QtWidgets.QHBoxLayout()
        self.check_button = QtWidgets.QPushButton()
        self.check_button.clicked.connect(self._check)
        self.reveal_button = QtWidgets.QPushButton()
        self.reveal_button.clicked.connect(self._reveal)
        self.next_button = QtWidgets.QPushButton()
        self.next_button.clicked.connect(self._next)
        for button in (self.check_button, self.reveal_button, self.next_button):
            buttons.addWidget(button)

        main_layout.addWidget(self.header_label)
        main_layout.addWidget(self.title_label)
        main_layout.addLayout(self.equation_row)
        main_layout.addLayout(buttons)
        main_layout.addWidget(self.feedback_label, stretch=1)

        layout.addWidget(side_panel, stretch=1)
        layout.addWidget(main_panel, stretch=2)

        self._load()

    def _load(self) -> None:
        self._run_loading(self.session.load)

    def _run_loading(self, action) -> None:
        QtWidgets.QApplication.setOverrideCursor(QtCore.Qt.CursorShape.WaitCursor)
        try:
            action()
        finally:
            QtWidgets.QApplication.restoreOverrideCursor()
        self._render_question()

    def _change_topic(self) -> None:
        self._run_loading(lambda: self.session.change_topic(self.topic_box.currentData()))

    def _change_language(self) -> None:
        self.session.change_language(self.language_box.currentData())
        self._render_question()

    def _clear_equation_row(self) -> None:
        while self.equation_row.count():
            item = self.equation_row.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

    def _render_question(self) -> None:
        """Rebuild the coefficient boxes for the current question."""
        self._clear_equation_row()
        views = term_views(self.session)
        for index, view in enumerate(views):
            if index > 0:
                joiner = self.session.topic.arrow if (
                    view.side == PRODUCT and views[index - 1].side != PRODUCT
                ) else "+"
                self.equation_row.addWidget(QtWidgets.QLabel(joiner))

            edit = QtWidgets.QLineEdit(view.text)
            edit.setPlaceholderText("1")
            edit.setMaximumWidth(48)
            edit.setValidator(QtGui.QRegularExpressionValidator(COEFFICIENT_PATTERN, edit))
            edit.textEdited.connect(
                lambda text, tid=view.term_id: self._edit(tid, text)
            )
            self.equation_row.addWidget(edit)
            self.equation_row.addWidget(QtWidgets.QLabel(view.label))
        self._refresh()

    def _refresh(self) -> None:
        labels = LABELS[self.session.language]
        self.header_label.setText(header_text(self.session))
        self.title_label.setText(labels["title"])
        self.check_button.setText(labels["check"])
        self.reveal_button.setText(labels["reveal"])
        self.next_button.setText(labels["next"])
        self.feedback_label.setText(feedback_text(self.session))
        self.guide_label.setText(
            "\n\n".join(
                f"{step.title}\n{step.description}"
                for step in balancing_guide(self.session.topic, self.session.language)
            )
        )

        terminal = self.session.state.is_terminal
        self.check_button.setEnabled(not terminal)
        self.reveal_button.setEnabled(not terminal)
        self.next_button.setEnabled(terminal)

        views = {view.term_id: view for view in term_views(self.session)}
        edits = [
            self.equation_row.itemAt(i).widget()
            for i in range(self.equation_row.count())
            if isinstance(self.equation_row.itemAt(i).widget(), QtWidgets.QLineEdit)
        ]
        for edit, view in zip(edits, views.values()):
            edit.setReadOnly(not view.editable)
            edit.setStyleSheet("color: red;" if view.wrong else "")

    def _edit(self, term: str, text: str) -> None:
        was_incorrect = self.session.state is QuestionState.INCORRECT
        if self.session.edit_coefficient(term, text) and was_incorrect:
            self._refresh()

    def _check(self) -> None:
        self.session.check()
        self._refresh()

    def _reveal(self) -> None:
        self.session.reveal()
        self._refresh()

    def _next(self) -> None:
        self._run_loading(self.session.next)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = QtWidgets.QApplication(sys.argv)
    window = DrillWindow(GeminiQuestionSource(GeminiSettings.from_env()))
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
