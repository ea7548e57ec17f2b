"""
Tests for the bytree command line interface.
"""

import io
import os
import unittest
from contextlib import redirect_stderr, redirect_stdout

from bytree import __version__
from bytree.cli import create_parser, main
from bytree.core import list_worktrees
from bytree.utils.exclude import get_exclude_path

from test_core import GitTestCase


def run_cli(*args):
    """Run main() and capture its output."""
    stdout = io.StringIO()
    stderr = io.StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        code = main(list(args))
    return code, stdout.getvalue(), stderr.getvalue()


class TestParser(unittest.TestCase):
    """Test argument parsing."""

    def test_no_arguments_prints_help(self):
        """Test running without arguments shows usage and succeeds."""
        code, out, _ = run_cli()
        self.assertEqual(code, 0)
        self.assertIn('usage: bytree', out)

    def test_help(self):
        """Test --help exits cleanly."""
        with redirect_stdout(io.StringIO()) as out:
            with self.assertRaises(SystemExit) as context:
                main(['--help'])
        self.assertEqual(context.exception.code, 0)
        self.assertIn('excluded', out.getvalue())

    def test_version(self):
        """Test --version and -v print the version."""
        for flag in ('--version', '-v'):
            with redirect_stdout(io.StringIO()) as out:
                with self.assertRaises(SystemExit) as context:
                    main([flag])
            self.assertEqual(context.exception.code, 0)
            self.assertIn(__version__, out.getvalue())

    def test_unknown_command(self):
        """Test unknown commands are usage errors."""
        code, _, err = run_cli('frobnicate')
        self.assertEqual(code, 1)
        self.assertIn('Error:', err)

    def test_add_options(self):
        """Test add accepts --base and --no-copy."""
        args = create_parser().parse_args(['add', 'demo', '--base', 'develop', '--no-copy'])
        self.assertEqual(args.name, 'demo')
        self.assertEqual(args.base, 'develop')
        self.assertTrue(args.no_copy)


class TestCommands(GitTestCase):
    """Test commands against a real repository."""

    def setUp(self):
        """Set up test fixtures."""
        super().setUp()
        old_cwd = os.getcwd()
        os.chdir(self.repo_path)
        self.addCleanup(os.chdir, old_cwd)

        self.exclude = get_exclude_path(self.repo_path)
        self.exclude.parent.mkdir(parents=True, exist_ok=True)
        self.exclude.write_text("/.claude/\n# comment\n\n")
        for name in ('.claude/settings.json', '.claude/cache/tmp.bin'):
            path = self.repo_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(name)

    def test_add_requires_name(self):
        """Test add without a name is a usage error."""
        code, _, err = run_cli('add')
        self.assertEqual(code, 1)
        self.assertIn('Name required', err)

    def test_remove_requires_name(self):
        """Test remove without a name is a usage error."""
        code, _, err = run_cli('remove')
        self.assertEqual(code, 1)
        self.assertIn('Usage: bytree remove <name>', err)

    def test_add_copies_excluded_files(self):
        """Test add creates the worktree and replicates excluded files."""
        code, out, err = run_cli('add', 'demo', '--base', self.base_branch)

        self.assertEqual(code, 0, err)
        worktree_path = self.worktree_base / 'demo'
        self.assertTrue((worktree_path / '.claude' / 'settings.json').exists())
        self.assertTrue((worktree_path / '.claude' / 'cache' / 'tmp.bin').exists())
        self.assertIn('acme/widgets', out)
        self.assertIn('Copied 2 excluded file(s)', out)
        self.assertIn('Branch: bytree/demo', out)

    def test_add_twice(self):
        """Test adding the same name twice leaves exactly one worktree."""
        self.assertEqual(run_cli('add', 'demo', '--base', self.base_branch)[0], 0)
        self.assertEqual(run_cli('add', 'demo', '--base', self.base_branch)[0], 0)

        worktrees = list_worktrees(self.repo_path)
        self.assertEqual([wt.path for wt in worktrees], [self.worktree_base / 'demo'])

    def test_add_no_copy(self):
        """Test --no-copy skips replication."""
        code, out, _ = run_cli('add', 'demo', '--base', self.base_branch, '--no-copy')

        self.assertEqual(code, 0)
        self.assertNotIn('Copying excluded files', out)
        self.assertFalse((self.worktree_base / 'demo' / '.claude').exists())

    def test_add_uses_configured_base(self):
        """Test base_branch from bytree.toml is used without --base."""
        (self.repo_path / '.git' / 'bytree.toml').write_text(
            f'[options]\nbase_branch = "{self.base_branch}"\n'
        )

        code, out, err = run_cli('add', 'demo')

        self.assertEqual(code, 0, err)
        self.assertIn(f'base: {self.base_branch}', out)

    def test_add_bad_base(self):
        """Test a failed worktree creation exits non-zero."""
        code, _, err = run_cli('add', 'demo', '--base', 'no-such-branch')

        self.assertEqual(code, 1)
        self.assertIn('Failed to create worktree', err)

    def test_add_without_origin(self):
        """Test a repository without a parsable origin fails."""
        self.repo.delete_remote('origin')

        code, _, err = run_cli('add', 'demo', '--base', self.base_branch)

        self.assertEqual(code, 1)
        self.assertIn('origin', err)

    def test_list(self):
        """Test list shows bytree worktrees only."""
        self.repo.git.worktree('add', '-b', 'side', str(self.temp_path / 'side'))
        run_cli('add', 'demo', '--base', self.base_branch)

        code, out, _ = run_cli('list')

        self.assertEqual(code, 0)
        self.assertIn('bytree/demo', out)
        self.assertIn(str(self.worktree_base / 'demo'), out)
        self.assertNotIn(str(self.temp_path / 'side'), out)

    def test_list_empty(self):
        """Test list without worktrees prints a hint."""
        code, out, _ = run_cli('list')

        self.assertEqual(code, 0)
        self.assertIn('No worktrees found.', out)
        self.assertIn(f'main checkout: {self.base_branch}', out)

    def test_remove(self):
        """Test remove deletes the worktree and branch."""
        run_cli('add', 'demo', '--base', self.base_branch)

        code, out, _ = run_cli('remove', 'demo')

        self.assertEqual(code, 0)
        self.assertIn('Removed demo', out)
        self.assertFalse((self.worktree_base / 'demo').exists())
        self.assertNotIn('bytree/demo', [head.name for head in self.repo.heads])

    def test_excluded(self):
        """Test excluded prints the raw patterns."""
        code, out, _ = run_cli('excluded')

        self.assertEqual(code, 0)
        self.assertIn('/.claude/', out)
        self.assertNotIn('# comment', out)

    def test_excluded_files(self):
        """Test excluded --files prints resolved paths."""
        code, out, _ = run_cli('excluded', '--files')

        self.assertEqual(code, 0)
        self.assertIn('.claude/settings.json', out)
        self.assertIn('.claude/cache/tmp.bin', out)

    def test_not_a_repository(self):
        """Test commands outside a repository fail."""
        plain = self.temp_path / 'plain'
        plain.mkdir()
        os.chdir(plain)

        code, _, err = run_cli('list')

        self.assertEqual(code, 1)
        self.assertIn('Not a Git repository', err)


if __name__ == '__main__':
    unittest.main()
