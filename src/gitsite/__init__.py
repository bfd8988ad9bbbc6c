"""
gitsite - deploy generated site documentation to a git pages branch

A command-line interface and library that publishes a site directory to a
branch such as gh-pages by driving the git executable from a scratch clone.
"""
import argparse
import sys

__version__ = "1.0.0"


def main():
    """Main CLI entry point"""
    from gitsite.commands import deploy, list_files, clean

    parser = argparse.ArgumentParser(
        prog='gitsite',
        description='gitsite: deploy site documentation to a git pages branch',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  gitsite deploy target/site --url gitsite:github.com/me/project.git
  gitsite deploy target/site --dest apidocs --branch pages
  gitsite deploy index.html --dest docs/index.html --config gitsite.yaml
  gitsite list docs --url gitsite:github.com/me/project.git
  gitsite clean                     # Remove leftover scratch checkouts
        '''
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Deploy command
    deploy_parser = subparsers.add_parser('deploy', help='Deploy a site file or directory')
    deploy.setup_parser(deploy_parser)

    # List command
    list_parser = subparsers.add_parser('list', help='List files on the pages branch')
    list_files.setup_parser(list_parser)

    # Clean command
    clean_parser = subparsers.add_parser('clean', help='Remove leftover scratch checkouts')
    clean.setup_parser(clean_parser)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Dispatch to command handler
    try:
        if args.command == 'deploy':
            sys.exit(deploy.execute(args))
        elif args.command == 'list':
            sys.exit(list_files.execute(args))
        elif args.command == 'clean':
            sys.exit(clean.execute(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
