"""
GH Score Command Line Interface

Provides CLI commands for operating the GH Score service: database
setup, user provisioning, and quick views of the vacancy board.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="ghscore",
    help="GH Score vacancy pipeline CLI",
    add_completion=False,
)
console = Console()

SLA_COLORS = {
    "completed": "blue",
    "overdue": "red",
    "urgent": "yellow",
    "on_track": "green",
}


def _require_database() -> None:
    from ghscore.data.database import get_database_manager

    if not get_database_manager().check_connection():
        console.print("[red]Error: Could not connect to MongoDB. Run 'init-db' first.[/red]")
        raise typer.Exit(1)


def _tenant(tenant: Optional[str]) -> str:
    from ghscore.utils.config import get_settings

    return tenant or get_settings().default_tenant


@app.command()
def version():
    """Show application version."""
    from ghscore import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show system information and configuration."""
    from ghscore.utils.config import get_settings

    settings = get_settings()

    table = Table(title="GH Score Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Default Tenant", settings.default_tenant)
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Scoring Provider", settings.scoring.provider)
    table.add_row("Session TTL (h)", str(settings.auth.session_ttl_hours))
    table.add_row("Tracking URL", settings.tracking.base_url)
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Initialize the database with required collections and indexes."""
    from pymongo.errors import PyMongoError

    from ghscore.data.database import get_database_manager

    console.print("[yellow]Initializing database...[/yellow]")

    db_manager = get_database_manager()
    console.print("  Checking database connection...")
    if not db_manager.check_connection():
        console.print("[red]Error: Could not connect to MongoDB.[/red]")
        console.print("[dim]Make sure MongoDB is running and connection settings are correct.[/dim]")
        raise typer.Exit(1)
    console.print("  [green]✓[/green] Connected to MongoDB")

    console.print("  Creating indexes...")
    try:
        db_manager.ensure_indexes()
    except PyMongoError as e:
        console.print(f"[red]Error creating indexes: {e}[/red]")
        raise typer.Exit(1)
    console.print("  [green]✓[/green] Indexes created")

    console.print("\n[green]Database initialized successfully![/green]")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    from ghscore.main import run_server

    run_server(host=host, port=port, reload=reload)


@app.command()
def create_user(
    email: str = typer.Option(..., "--email", "-e", help="Login email"),
    full_name: str = typer.Option(..., "--name", "-n", help="Full name"),
    role: str = typer.Option("recruiter", "--role", "-r", help="superadmin/admin/recruiter/viewer"),
    tenant: Optional[str] = typer.Option(None, "--tenant", "-t", help="Tenant id"),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True
    ),
):
    """Create a platform user."""
    from ghscore.core.auth.sessions import get_session_manager
    from ghscore.core.errors import GHScoreError
    from ghscore.utils.constants import UserRole

    try:
        user_role = UserRole(role.lower())
    except ValueError:
        console.print(f"[red]Invalid role: {role}[/red]")
        console.print(f"[dim]Valid roles: {', '.join(r.value for r in UserRole)}[/dim]")
        raise typer.Exit(1)

    _require_database()
    try:
        user = get_session_manager().create_user(
            email=email,
            password=password,
            full_name=full_name,
            tenant_id=_tenant(tenant),
            role=user_role,
        )
    except GHScoreError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] User created with ID: [cyan]{user.id}[/cyan]")


@app.command()
def next_code(
    tenant: Optional[str] = typer.Option(None, "--tenant", "-t", help="Tenant id"),
):
    """Show the next requisition code without consuming it."""
    from ghscore.core.vacancies.lifecycle import get_vacancy_lifecycle_manager

    _require_database()
    code = get_vacancy_lifecycle_manager().get_next_code(_tenant(tenant))
    console.print(f"Next requisition code: [bold cyan]{code}[/bold cyan]")


@app.command()
def list_vacancies(
    state: Optional[str] = typer.Option(None, "--state", "-s", help="Filter by state"),
    tenant: Optional[str] = typer.Option(None, "--tenant", "-t", help="Tenant id"),
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum number of vacancies to show"),
):
    """List vacancies with days open and SLA status."""
    from ghscore.core.vacancies.lifecycle import (
        compute_days_open,
        compute_sla_status,
        get_vacancy_lifecycle_manager,
    )
    from ghscore.data.repositories import get_site_repository
    from ghscore.utils.constants import VacancyState

    vacancy_state = None
    if state:
        try:
            vacancy_state = VacancyState(state.lower())
        except ValueError:
            console.print(f"[red]Invalid state: {state}[/red]")
            console.print(f"[dim]Valid states: {', '.join(s.value for s in VacancyState)}[/dim]")
            raise typer.Exit(1)

    _require_database()
    tenant_id = _tenant(tenant)
    vacancies = get_vacancy_lifecycle_manager().list_vacancies(tenant_id, state=vacancy_state)[:limit]

    if not vacancies:
        console.print("[yellow]No vacancies found.[/yellow]")
        raise typer.Exit(0)

    site_names = get_site_repository().names_by_id(tenant_id)

    table = Table(title=f"Vacancies ({len(vacancies)} shown)")
    table.add_column("Code", style="cyan")
    table.add_column("Title")
    table.add_column("Site")
    table.add_column("State", justify="center")
    table.add_column("Days", justify="right")
    table.add_column("SLA")

    for vacancy in vacancies:
        sla = compute_sla_status(vacancy)
        color = SLA_COLORS.get(sla.level.value, "white")
        table.add_row(
            vacancy.requisition_code,
            vacancy.title[:40] + "..." if len(vacancy.title) > 40 else vacancy.title,
            site_names.get(vacancy.site_id, "-"),
            vacancy.state,
            str(compute_days_open(vacancy)),
            f"[{color}]{sla.label}[/{color}]",
        )

    console.print(table)


@app.command()
def stats(
    tenant: Optional[str] = typer.Option(None, "--tenant", "-t", help="Tenant id"),
):
    """Show dashboard KPIs."""
    from ghscore.core.analytics.aggregator import get_analytics_aggregator

    _require_database()
    dashboard = get_analytics_aggregator().dashboard(_tenant(tenant))

    table = Table(title="Dashboard")
    table.add_column("Indicator", style="cyan")
    table.add_column("Value", justify="right", style="green")

    table.add_row("Average lead time (days)", f"{dashboard.avg_lead_time:.1f}")
    table.add_row("On-time efficiency (%)", f"{dashboard.efficiency:.1f}")
    table.add_row("Open", str(dashboard.open_count))
    table.add_row("Filled", str(dashboard.closed_count))
    table.add_row("Overdue", str(dashboard.expired_count))
    table.add_row("Financial impact", f"{dashboard.total_financial_impact:,.2f}")
    table.add_row("Top site", dashboard.top_site or "-")
    console.print(table)

    if dashboard.recruiter_workload:
        workload = Table(title="Recruiter workload")
        workload.add_column("Recruiter")
        workload.add_column("Active", justify="right")
        for row in dashboard.recruiter_workload:
            workload.add_row(row.label, str(row.count))
        console.print(workload)

    if dashboard.stage_bottlenecks:
        bottlenecks = Table(title="Average days per stage")
        bottlenecks.add_column("Stage")
        bottlenecks.add_column("Days", justify="right")
        bottlenecks.add_column("Samples", justify="right")
        for row in dashboard.stage_bottlenecks:
            bottlenecks.add_row(row.stage, f"{row.average_days:.1f}", str(row.samples))
        console.print(bottlenecks)


if __name__ == "__main__":
    app()
