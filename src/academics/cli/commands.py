"""CLI commands for the academic records service.

Commands:
- init-db: Create the SQLite schema
- serve: Run the Web API with uvicorn
- student-average: Print a student's average grade
- module-average: Print a module's average grade
"""

from pathlib import Path

import typer
from rich.console import Console

from academics.core.errors import ErrorKind, Result
from academics.db.database import get_db_path, init_db
from academics.services.records_service import RecordsService

app = typer.Typer(
    name="academics",
    help="Academic records: students, modules, registrations and grades.",
    no_args_is_help=True,
)

console = Console()


def _exit_on_failure(result: Result) -> None:
    """Print a failed result and exit with a non-zero code."""
    if result.success:
        return
    console.print(f"[red]✗ {result.message}[/red]")
    raise typer.Exit(code=2 if result.error == ErrorKind.NOT_FOUND else 1)


@app.command(name="init-db")
def init_database(
    db: Path = typer.Option(None, "--db", help="Database file (default: from config)"),
) -> None:
    """Create the database schema."""
    init_db(db)
    console.print(f"[green]✓ Database ready:[/green] {get_db_path()}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    reload: bool = typer.Option(False, "--reload"),
) -> None:
    """Run the Web API."""
    import uvicorn

    console.print(f"[bold]Serving on[/bold] http://{host}:{port}")
    uvicorn.run(
        "academics.web.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@app.command(name="student-average")
def student_average(
    student_id: int = typer.Argument(..., help="Student id"),
    db: Path = typer.Option(None, "--db", help="Database file (default: from config)"),
) -> None:
    """Print the average of all of a student's grades."""
    init_db(db)
    result = RecordsService().student_average(student_id)
    _exit_on_failure(result)
    console.print(f"Student {student_id}: [bold]{result.value:.2f}[/bold]")


@app.command(name="module-average")
def module_average(
    code: str = typer.Argument(..., help="Module code"),
    year: str = typer.Option(None, "--year", help="Academic year, e.g. 2024/2025"),
    db: Path = typer.Option(None, "--db", help="Database file (default: from config)"),
) -> None:
    """Print a module's average grade, optionally for one academic year."""
    init_db(db)
    result = RecordsService().module_average(code, year)
    _exit_on_failure(result)
    label = f"{code} ({year})" if year else code
    console.print(f"{label}: [bold]{result.value:.2f}[/bold]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
