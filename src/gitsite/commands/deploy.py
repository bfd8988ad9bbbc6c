"""Deploy a site file or directory to a git pages branch"""
from pathlib import Path

from gitsite.core import ConsoleLogger
from gitsite.deploy import DeployerFactory, DeploymentError
from gitsite.deploy.exceptions import ConfigError
from gitsite.utils.config import load_deploy_config


def setup_parser(parser):
    """Setup argument parser for deploy command"""
    parser.add_argument(
        'source',
        help='Generated site directory (or single file) to deploy'
    )
    parser.add_argument(
        '--dest',
        dest='destination',
        help='Path inside the branch to deploy to (default: repository root)'
    )
    parser.add_argument(
        '--url',
        help='Repository URL, e.g. gitsite:github.com/user/repo.git[:branch]'
    )
    parser.add_argument(
        '--branch',
        help='Remote branch (default: gh-pages, or the branch in the URL)'
    )
    parser.add_argument(
        '--message',
        help='Commit message; {name} is replaced by the source name'
    )
    parser.add_argument(
        '--config',
        help='Deploy configuration file (default: gitsite.yaml if present)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show every git command'
    )


def execute(args):
    """Execute deploy command"""
    print("=" * 80)
    print("Site Deployment")
    print("=" * 80)
    print()

    try:
        settings = load_deploy_config(args.config, overrides={
            'url': args.url,
            'branch': args.branch,
            'destination': args.destination,
            'message': args.message,
        })
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    if not settings.url:
        print("Error: No repository URL given")
        print("Examples:")
        print("  gitsite deploy target/site --url gitsite:github.com/me/project.git")
        print("  gitsite deploy target/site --config gitsite.yaml")
        return 1

    source = Path(args.source)
    if not source.exists():
        print(f"Error: Source not found: {source}")
        return 1

    logger = ConsoleLogger(verbose=args.verbose)
    try:
        with DeployerFactory.from_repository_url(
            settings.url,
            settings.credentials,
            logger=logger,
            branch=settings.branch,
            local_branch=settings.local_branch,
            git_executable=settings.git_executable,
            identity=settings.identity,
            message_template=settings.message,
        ) as deployer:
            if source.is_dir():
                result = deployer.put_directory(source, settings.destination)
            else:
                destination = settings.destination
                if not destination or destination.endswith('/'):
                    destination += source.name
                result = deployer.put(source, destination)
    except DeploymentError as e:
        print(f"Error: {e}")
        return 1

    print()
    print(f"Branch:      {result.branch}{' (created)' if result.branch_created else ''}")
    print(f"Destination: /{result.destination}")
    print(f"Staged:      {result.staged_files} file(s)")
    print(f"Committed:   {len(result.committed_files)} change(s)")
    print("\nDone!")
    return 0
