"""Command-line entrypoints for chembalance."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from chembalance.balance import check_answer, is_valid_coefficient_input
from chembalance.constants import DEFAULT_BATCH_SIZE
from chembalance.formula import (
    format_equation,
    format_formula,
    formula_charge,
    parse_equation,
    parse_formula,
)
from chembalance.guide import balancing_guide
from chembalance.models import Language, Topic
from chembalance.session import DrillSession, QuestionState
from chembalance.sources import (
    FallbackQuestionSource,
    GeminiQuestionSource,
    GeminiSettings,
    JsonFileQuestionSource,
    QuestionSource,
)

app = typer.Typer(add_completion=False)

REVEAL = "?"
QUIT = "q"


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")] = False,
) -> None:
    """Practice balancing chemical equations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def parse(
    formula: Annotated[str, typer.Argument(help="Formula, e.g. 'Fe2(SO4)3' or 'SO4^2-'.")],
) -> None:
    """Show the atom counts and charge of a formula."""
    payload = {
        "formula": formula,
        "display": format_formula(formula),
        "atoms": parse_formula(formula),
        "charge": formula_charge(formula),
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def check(
    equation: Annotated[
        str, typer.Argument(help="Reference equation, e.g. '2H2 + O2 -> 2H2O'.")
    ],
    answer: Annotated[
        str, typer.Option(help="Your coefficients in term order, space separated.")
    ],
    topic: Annotated[Topic, typer.Option(help="Topic used to tailor the hint.")] = Topic.METALS,
    language: Annotated[Language, typer.Option(help="Hint language.")] = Language.EN,
) -> None:
    """Check an answer against a reference equation."""
    try:
        reference = parse_equation(equation)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="EQUATION") from exc

    values = answer.split()
    term_ids = [tid for tid, _ in reference.terms()]
    if len(values) != len(term_ids):
        raise typer.BadParameter(
            f"Expected {len(term_ids)} coefficients, got {len(values)}", param_hint="--answer"
        )
    invalid = [raw for raw in values if not is_valid_coefficient_input(raw)]
    if invalid:
        raise typer.BadParameter(
            f"Coefficients must be positive whole numbers, got {' '.join(invalid)}",
            param_hint="--answer",
        )

    result = check_answer(reference, dict(zip(term_ids, values)), topic, language)
    if result.correct:
        typer.echo("Correct!")
        return
    typer.echo("Incorrect.")
    if result.hint:
        typer.echo(result.hint)
    raise typer.Exit(code=1)


@app.command()
def guide(
    topic: Annotated[Topic, typer.Option(help="Topic of the guide.")] = Topic.METALS,
    language: Annotated[Language, typer.Option(help="Guide language.")] = Language.EN,
) -> None:
    """Print the balancing steps for a topic."""
    for step in balancing_guide(topic, language):
        typer.echo(step.title)
        typer.echo(step.description)
        typer.echo("")


def _build_source(questions: Path | None, offline: bool) -> QuestionSource:
    if questions is not None:
        return JsonFileQuestionSource(questions)
    if offline:
        return FallbackQuestionSource()
    return GeminiQuestionSource(GeminiSettings.from_env())


def _ask_question(session: DrillSession) -> bool:
    """Run one question to a terminal state; returns False if the user quits."""
    equation = session.current
    number, total = session.position
    typer.echo(f"\n[{number}/{total}] {format_equation(equation, {}, session.topic.arrow)}")

    while not session.state.is_terminal:
        typer.echo(f"Coefficients (blank = 1, '{REVEAL}' reveals, '{QUIT}' quits):")
        for tid, component in equation.terms():
            while True:
                raw = typer.prompt(
                    f"  {format_formula(component.formula)}", default="", show_default=False
                ).strip()
                if raw == QUIT:
                    return False
                if raw == REVEAL:
                    answer = session.reveal()
                    typer.echo(f"Answer: {format_equation(equation, answer, session.topic.arrow)}")
                    return True
                if session.edit_coefficient(tid, raw):
                    break
                typer.echo("  Enter a positive whole number.")

        result = session.check()
        if session.state is QuestionState.CORRECT:
            typer.echo("Correct! Balanced.")
        else:
            typer.echo("Incorrect.")
            typer.echo(result.hint or "")
    return True


@app.command()
def drill(
    topic: Annotated[Topic, typer.Option(help="Topic to practise.")] = Topic.METALS,
    language: Annotated[Language, typer.Option(help="Language of names and hints.")] = Language.EN,
    count: Annotated[int, typer.Option(min=1, help="Questions per batch.")] = DEFAULT_BATCH_SIZE,
    offline: Annotated[bool, typer.Option(help="Use the built-in equations only.")] = False,
    questions: Annotated[
        Path | None, typer.Option(help="JSON file of equations to practise.")
    ] = None,
) -> None:
    """Run an interactive balancing drill."""
    session = DrillSession(_build_source(questions, offline), topic, language, batch_size=count)
    session.load()
    if session.offline:
        typer.echo("Offline mode: using built-in equations.")

    answered = 0
    while _ask_question(session):
        answered += 1
        if session.index == len(session.equations) - 1:
            typer.echo(f"Batch complete. Score: {session.score}")
            if not typer.confirm("Load more questions?", default=True):
                break
        session.next()

    typer.echo(f"Questions attempted: {answered}. Score: {session.score}")
