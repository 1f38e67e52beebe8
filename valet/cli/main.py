"""CLI entry point and commands.

Provides the main CLI application with commands for:
- generate: Build values.schema.json from a local or remote chart
- fetch-schema: Download an existing schema from a remote chart
- version: Print the installed version
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from valet.exceptions import ConfigurationError, ValetError
from valet.generate import generate as generate_schema
from valet.generate import generate_from_values, log_component_summary
from valet.helm import HelmClient
from valet.loader import load_values
from valet.logging_config import configure_logging
from valet.settings import (
    DEFAULT_CONFIG_FILE,
    HelmAuth,
    HelmChart,
    HelmRegistry,
    HelmTLS,
    Settings,
    load_settings,
)
from valet.version import get_build_version
from valet.writer import write_schema

app = typer.Typer(
    name="valet",
    help="JSON Schema generator for Helm charts and other YAML files.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)

# Remote chart options shared by generate and fetch-schema
ChartNameOpt = Annotated[Optional[str], typer.Option("--chart-name", help="Name of the remote Helm chart")]  # noqa: UP007
ChartVersionOpt = Annotated[
    Optional[str],  # noqa: UP007
    typer.Option("--chart-version", help="Version of the remote Helm chart"),
]
RegistryUrlOpt = Annotated[
    Optional[str],  # noqa: UP007
    typer.Option("--registry-url", help="URL of the Helm chart registry"),
]
RegistryTypeOpt = Annotated[str, typer.Option("--registry-type", help="Registry type (HTTP, HTTPS, OCI)")]
RegistryInsecureOpt = Annotated[
    bool,
    typer.Option("--registry-insecure", help="Allow insecure connections to the registry"),
]
RegistryUsernameOpt = Annotated[str, typer.Option("--registry-username", help="Registry username")]
RegistryPasswordOpt = Annotated[str, typer.Option("--registry-password", help="Registry password")]
RegistryTokenOpt = Annotated[str, typer.Option("--registry-token", help="Registry bearer token")]
TlsSkipVerifyOpt = Annotated[
    bool,
    typer.Option("--registry-tls-skip-verify", help="Skip TLS certificate verification"),
]
CertFileOpt = Annotated[str, typer.Option("--registry-cert-file", help="Client certificate file")]
KeyFileOpt = Annotated[str, typer.Option("--registry-key-file", help="Client key file")]
CaFileOpt = Annotated[str, typer.Option("--registry-ca-file", help="CA certificate file")]


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]❌ {escape(message)}[/red]")
    return typer.Exit(code=1)


def _settings(ctx: typer.Context) -> Settings:
    if isinstance(ctx.obj, Settings):
        return ctx.obj
    return load_settings()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_file: Annotated[
        Path,
        typer.Option("--config-file", help="Config file path"),
    ] = Path(DEFAULT_CONFIG_FILE),
    log_level: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging"),
    ] = False,
    context: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--context", "-c", help="Context directory containing values.yaml"),
    ] = None,
    overrides: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--overrides", "-f", help="Overrides file, relative to the context directory"),
    ] = None,
    output: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--output", "-o", help="Output file (default: values.schema.json)"),
    ] = None,
) -> None:
    """JSON Schema generator for Helm charts and other YAML files.

    Without a subcommand, generates a schema for the configured context
    directory.
    """
    try:
        settings = load_settings(
            config_file,
            log_level=log_level,
            debug=debug or None,
            context=context,
            overrides=overrides,
            output=output,
        )
    except ValidationError as exc:
        raise _fail(f"Invalid configuration: {exc}") from exc

    configure_logging(settings.effective_log_level)
    ctx.obj = settings

    if ctx.invoked_subcommand is not None:
        return
    if not settings.context:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        result = generate_schema(settings.context, settings.overrides, settings.output)
    except ValetError as exc:
        raise _fail(str(exc)) from exc
    console.print(result.message)


@app.command()
def generate(
    ctx: typer.Context,
    context_dir: Annotated[
        Optional[str],  # noqa: UP007
        typer.Argument(help="Chart directory containing values.yaml"),
    ] = None,
    overrides: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--overrides", "-f", help="Overrides YAML, relative to the context directory"),
    ] = None,
    output: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--output", "-o", help="Output file"),
    ] = None,
    chart_name: ChartNameOpt = None,
    chart_version: ChartVersionOpt = None,
    registry_url: RegistryUrlOpt = None,
    registry_type: RegistryTypeOpt = "HTTPS",
    registry_insecure: RegistryInsecureOpt = False,
    registry_username: RegistryUsernameOpt = "",
    registry_password: RegistryPasswordOpt = "",
    registry_token: RegistryTokenOpt = "",
    registry_tls_skip_verify: TlsSkipVerifyOpt = False,
    registry_cert_file: CertFileOpt = "",
    registry_key_file: KeyFileOpt = "",
    registry_ca_file: CaFileOpt = "",
) -> None:
    """Generate a JSON Schema from values.yaml.

    Works on either a local chart directory (CONTEXT_DIR) or a remote
    chart (--chart-name and related flags, or helm config in the
    config file), optionally merging an overrides YAML file first.
    """
    settings = _settings(ctx)
    overrides = overrides or settings.overrides
    output = output or settings.output

    try:
        chart = _resolve_chart(
            settings,
            chart_name=chart_name,
            chart_version=chart_version,
            registry_url=registry_url,
            registry_type=registry_type,
            registry_insecure=registry_insecure,
            registry_username=registry_username,
            registry_password=registry_password,
            registry_token=registry_token,
            registry_tls_skip_verify=registry_tls_skip_verify,
            registry_cert_file=registry_cert_file,
            registry_key_file=registry_key_file,
            registry_ca_file=registry_ca_file,
        )
        if chart is not None and context_dir is not None:
            raise ConfigurationError("cannot specify both local context directory and remote chart configuration")

        if chart is not None:
            message = _generate_remote(chart, overrides, output)
        else:
            local_dir = context_dir or settings.context
            if not local_dir:
                raise ConfigurationError(
                    "must provide either a context directory for a local chart or remote chart "
                    "configuration (via --chart-name or helm config in the config file)"
                )
            message = generate_schema(local_dir, overrides, output).message
    except ValetError as exc:
        raise _fail(str(exc)) from exc

    console.print(message)


@app.command("fetch-schema")
def fetch_schema(
    ctx: typer.Context,
    output: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--output", "-o", help="Where to save the downloaded schema"),
    ] = None,
    chart_name: ChartNameOpt = None,
    chart_version: ChartVersionOpt = None,
    registry_url: RegistryUrlOpt = None,
    registry_type: RegistryTypeOpt = "HTTPS",
    registry_insecure: RegistryInsecureOpt = False,
    registry_username: RegistryUsernameOpt = "",
    registry_password: RegistryPasswordOpt = "",
    registry_token: RegistryTokenOpt = "",
    registry_tls_skip_verify: TlsSkipVerifyOpt = False,
    registry_cert_file: CertFileOpt = "",
    registry_key_file: KeyFileOpt = "",
    registry_ca_file: CaFileOpt = "",
) -> None:
    """Download values.schema.json from a remote chart."""
    settings = _settings(ctx)
    output = output or settings.output

    try:
        chart = _resolve_chart(
            settings,
            chart_name=chart_name,
            chart_version=chart_version,
            registry_url=registry_url,
            registry_type=registry_type,
            registry_insecure=registry_insecure,
            registry_username=registry_username,
            registry_password=registry_password,
            registry_token=registry_token,
            registry_tls_skip_verify=registry_tls_skip_verify,
            registry_cert_file=registry_cert_file,
            registry_key_file=registry_key_file,
            registry_ca_file=registry_ca_file,
        )
        if chart is None:
            raise ConfigurationError("remote chart configuration is required (--chart-name or helm config)")

        client = HelmClient()
        if not client.has_schema(chart):
            # get_schema_bytes raises SchemaNotFoundError with hints
            client.get_schema_bytes(chart)
        location = client.download_schema(chart, output)
    except ValetError as exc:
        raise _fail(str(exc)) from exc

    console.print(f"Downloaded remote chart schema to: {location}")


@app.command()
def version() -> None:
    """Print version information."""
    console.print(get_build_version())


def _resolve_chart(
    settings: Settings,
    *,
    chart_name: str | None,
    chart_version: str | None,
    registry_url: str | None,
    registry_type: str,
    registry_insecure: bool,
    registry_username: str,
    registry_password: str,
    registry_token: str,
    registry_tls_skip_verify: bool,
    registry_cert_file: str,
    registry_key_file: str,
    registry_ca_file: str,
) -> HelmChart | None:
    """Build the remote chart from flags, falling back to the config file."""
    if not chart_name:
        return settings.remote_chart

    if not chart_version:
        raise ConfigurationError("--chart-version is required when using remote chart")
    if not registry_url:
        raise ConfigurationError("--registry-url is required when using remote chart")

    try:
        return HelmChart(
            name=chart_name,
            version=chart_version,
            registry=HelmRegistry(
                url=registry_url,
                type=registry_type,
                insecure=registry_insecure,
                auth=HelmAuth(
                    username=registry_username,
                    password=registry_password,
                    token=registry_token,
                ),
                tls=HelmTLS(
                    insecure_skip_tls_verify=registry_tls_skip_verify,
                    cert_file=registry_cert_file,
                    key_file=registry_key_file,
                    ca_file=registry_ca_file,
                ),
            ),
        )
    except ValidationError as exc:
        raise ConfigurationError(f"invalid helm configuration: {exc}") from exc


def _generate_remote(chart: HelmChart, overrides: str | None, output: str) -> str:
    """Infer a schema from a remote chart's values.yaml."""
    client = HelmClient()
    base = client.load_values(chart)
    log_component_summary(chart.ref, base)

    override_values = load_values(overrides) if overrides else None
    document = generate_from_values(base, override_values)
    write_schema(document, output)

    if overrides:
        return f"Generated {output} by merging {overrides} into chart {chart.ref}"
    return f"Generated {output} from chart {chart.ref}"
