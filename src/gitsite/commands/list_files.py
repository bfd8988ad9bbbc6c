"""List files deployed on the pages branch"""
from gitsite.core import ConsoleLogger
from gitsite.deploy import DeployerFactory, DeploymentError
from gitsite.deploy.exceptions import ConfigError
from gitsite.utils.config import load_deploy_config


def setup_parser(parser):
    """Setup argument parser for list command"""
    parser.add_argument(
        'path',
        nargs='?',
        default='',
        help='Path inside the branch (default: everything)'
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
        '--config',
        help='Deploy configuration file (default: gitsite.yaml if present)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show every git command'
    )


def execute(args):
    """Execute list command"""
    try:
        settings = load_deploy_config(args.config, overrides={
            'url': args.url,
            'branch': args.branch,
        })
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    if not settings.url:
        print("Error: No repository URL given (use --url or a config file)")
        return 1

    try:
        with DeployerFactory.from_repository_url(
            settings.url,
            settings.credentials,
            logger=ConsoleLogger(verbose=args.verbose),
            branch=settings.branch,
            git_executable=settings.git_executable,
        ) as deployer:
            files = deployer.get_file_list(args.path)
    except DeploymentError as e:
        print(f"Error: {e}")
        return 1

    print()
    for name in files:
        print(f"  {name}")
    print(f"\n{len(files)} file(s)")
    return 0
