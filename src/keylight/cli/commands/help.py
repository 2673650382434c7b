from __future__ import annotations

import typer

HELP_TEXT = """\
Elgato Key Light Controller

USAGE:
  keylight                    Open interactive interface
  keylight [command] [args]   Run a single command

COMMANDS:
  on                          Turn on all lights
  off                         Turn off all lights

  bright +                    Increase brightness by 5%
  bright -                    Decrease brightness by 5%
  bright =                    Equalize brightness across all lights
  bright <value>              Set brightness to specific value (3-100)

  temp +                      Increase temperature by 200K
  temp -                      Decrease temperature by 200K
  temp =                      Equalize temperature across all lights
  temp <value>                Set temperature to specific value (2900-7000)

  list                        Show all configured lights
  detect                      Discover lights on network
  status                      Show status of all lights

  <light_name|index>          Toggle specific light
  <light_name> <command>      Control specific light
                              Commands: on, off, bright [+|-|value],
                              temp [+|-|value], status

  config show|init            Show or create the configuration file
  help                        Show this help message

EXAMPLES:
  keylight on                 Turn on all lights
  keylight bright 50          Set all lights to 50% brightness
  keylight temp 4000          Set all lights to 4000K
  keylight bright =           Match brightness across all lights
  keylight 1                  Toggle light 1
  keylight 2 bright +         Increase light 2 brightness
  keylight "My Light" on      Turn on specific light
  keylight status             Check status of all lights
"""


def show_help() -> None:
    """Show usage and examples."""
    typer.echo(HELP_TEXT)


def register(app: typer.Typer) -> None:
    app.command("help")(show_help)
