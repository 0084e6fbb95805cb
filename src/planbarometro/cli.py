"""Typer CLI entrypoint for assessment reports."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .logging import configure_logging
from .pipeline import AuditLogger, EvaluationLoadError
from .policy import BestPracticeRepository
from .schemas.config import load_config

app = typer.Typer(help="Planbarómetro self-assessment CLI.")


def _read_settings(config: Optional[Path]) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle)
    try:
        return load_config(loaded).to_settings()
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid config file: {exc}", param_hint="--config") from exc


@app.command()
def report(
    evaluation: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Evaluation JSON path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Report JSON output path.",
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    best_practices: Optional[Path] = typer.Option(
        None, exists=True, readable=True, dir_okay=False, help="Best-practices JSON path."
    ),
    suggestions_endpoint: Optional[str] = typer.Option(None, help="Policy suggestion API endpoint."),
    suggestions_api_key: Optional[str] = typer.Option(None, help="Policy suggestion API key."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Score an evaluation and write its report."""
    settings = _read_settings(config)
    if suggestions_endpoint:
        policy = settings.setdefault("policy", {})
        policy["suggestions_endpoint"] = suggestions_endpoint
        if suggestions_api_key:
            policy["suggestions_api_key"] = suggestions_api_key

    configure_logging(log_level)

    repository = None
    if best_practices:
        try:
            repository = BestPracticeRepository.from_json(best_practices)
        except (ValueError, ValidationError) as exc:
            raise typer.BadParameter(str(exc), param_hint="--best-practices") from exc

    container = create_container(settings=settings, best_practices=repository)
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None

    try:
        result = pipeline.run(
            evaluation_path=evaluation,
            output_path=output,
            audit_logger=audit_logger,
        )
    except (EvaluationLoadError, KeyError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        f"Overall {result['overall']['percentage']}% ({result['overall']['status']}), "
        f"{len(result['alerts'])} alerts. Report saved to {output}."
    )


@app.command()
def models(
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
) -> None:
    """List the assessment models available for evaluations."""
    container = create_container(settings=_read_settings(config))
    for model in container.catalog().models():
        elements = len(model.element_ids())
        typer.echo(f"{model.id}\t{model.name}\t{len(model.dimensions)} dimensions\t{elements} elements")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
