"""
Command line interface for gnetdump
"""
import argparse
import json
import logging
import os
import shutil
import sys

from . import __version__
from .config import Config, get_bundled_config_path
from .exceptions import InvalidCredentialsError, OutputWriteError
from .gcp_client import INVALID_CREDENTIALS_MESSAGE
from .models import errors_to_json_data, models_to_json_data
from .topology import aggregate_network_topologies
from .utils import save_to_json, verify_output_writable

ACCESS_TOKEN_ENV = 'CLOUDSDK_AUTH_ACCESS_TOKEN'

EXIT_OUTPUT_ERROR = 1
EXIT_INVALID_CREDENTIALS = 3
EXIT_FATAL = 99


def query_command(args: argparse.Namespace) -> None:
    """Execute the query command to dump the network topology of GCP projects"""
    file_args = [
        ('--output', args.output),
        ('--config-file', getattr(args, 'config_file', None))
    ]
    empty_file_args = [arg_name for arg_name, arg_value in file_args if arg_value is not None and not arg_value.strip()]
    if empty_file_args:
        logging.error(f"Empty file path provided for: {', '.join(empty_file_args)}")
        logging.error("Either provide valid file paths or omit the arguments to use defaults")
        sys.exit(1)

    if args.project is not None and not args.project.strip():
        logging.error("Empty project id provided for: --project")
        logging.error("Either provide a project id or omit the argument to dump all projects")
        sys.exit(1)

    access_token = args.access_token or os.getenv(ACCESS_TOKEN_ENV)
    if not access_token or not access_token.strip():
        logging.error(f"accessToken is a required parameter! Use --access-token or set {ACCESS_TOKEN_ENV}")
        logging.error('Run "gcloud auth print-access-token" to generate one')
        sys.exit(1)

    config = Config(getattr(args, 'config_file', None))
    output_file = args.output if args.output else config.output_file
    skip_default = args.skip_default or config.skip_default

    # Fail on an unwritable output path before doing any API calls
    verify_output_writable(output_file)

    results, errors = aggregate_network_topologies(access_token, args.project, skip_default, config)

    logging.info(f"Writing network topology to file: {output_file}")
    save_to_json(models_to_json_data(results), output_file, indent=config.output_indent)
    logging.info("Network topology dump complete.")

    if errors:
        print(f"Errors occurred during processing: {json.dumps(errors_to_json_data(errors), indent=2)}",
              file=sys.stderr)


def init_config_command(args: argparse.Namespace) -> None:
    """Copy the bundled configuration file to the working directory"""
    output_file = args.output if args.output else "config.yaml"

    if os.path.exists(output_file) and not args.force:
        logging.error(f"Configuration file {output_file} already exists. Use --force to overwrite.")
        sys.exit(1)

    shutil.copy2(get_bundled_config_path(), output_file)
    logging.info(f"Configuration file created: {output_file}")
    logging.info("You can now customize the configuration settings.")
    logging.info("Use --config-file to specify this file in other commands.")


class CustomHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """Custom formatter to prevent help text from wrapping to multiple lines"""
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=70, width=180)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="gnetdump - GCP network topology dump (VPC networks, peerings and subnetworks)",
        formatter_class=CustomHelpFormatter
    )
    parser.add_argument('--version', action='version', version=f'gnetdump {__version__}')

    subparsers = parser.add_subparsers(dest='command')
    subparsers.required = True

    # Query command
    query_parser = subparsers.add_parser('query', help='Dump the network topology of GCP projects to JSON',
                                         formatter_class=CustomHelpFormatter)
    query_parser.add_argument('-t', '--access-token',
                              help=f'Access token ("gcloud auth print-access-token"); defaults to ${ACCESS_TOKEN_ENV}')
    query_parser.add_argument('-p', '--project',
                              help='Only dump this project (default: all projects visible to the token)')
    query_parser.add_argument('-o', '--output',
                              help='Output JSON file (default: ./network_topology.json)')
    query_parser.add_argument('-s', '--skip-default', action='store_true',
                              help='Skip the auto-created "default" networks')
    query_parser.add_argument('-c', '--config-file',
                              help='Configuration file (default: bundled config.yaml)')
    query_parser.add_argument('-v', '--verbose', action='store_true',
                              help='Enable verbose logging')
    query_parser.set_defaults(func=query_command)

    # Init config command
    init_parser = subparsers.add_parser('init-config', help='Create a local copy of the default configuration',
                                        formatter_class=CustomHelpFormatter)
    init_parser.add_argument('-o', '--output', default='config.yaml',
                             help='Output configuration file (default: config.yaml)')
    init_parser.add_argument('-f', '--force', action='store_true',
                             help='Overwrite an existing file')
    init_parser.add_argument('-v', '--verbose', action='store_true',
                             help='Enable verbose logging')
    init_parser.set_defaults(func=init_config_command)

    return parser


def main() -> None:
    """Main CLI entry point with subcommand dispatch"""
    parser = create_parser()
    args = parser.parse_args()

    log_level = logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')
    logging.getLogger('googleapiclient.discovery_cache').setLevel(logging.ERROR)
    logging.getLogger('google.auth').setLevel(logging.ERROR)

    try:
        args.func(args)
    except OutputWriteError as e:
        logging.error(str(e))
        sys.exit(EXIT_OUTPUT_ERROR)
    except InvalidCredentialsError as e:
        logging.info(f"Credential failure: {e}")
        logging.error(INVALID_CREDENTIALS_MESSAGE)
        sys.exit(EXIT_INVALID_CREDENTIALS)
    except FileNotFoundError as e:
        logging.error(f"File not found: {e}")
        sys.exit(1)
    except Exception as e:
        logging.error(f"Error: {e}")
        sys.exit(EXIT_FATAL)


if __name__ == "__main__":
    main()
