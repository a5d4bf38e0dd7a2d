"""
Unit tests for the diff classifier.
"""

import pytest
from unittest.mock import Mock

from pr_triage.models.labels import LabelKey
from pr_triage.triage.classifier import DiffClassifier, classify


ALIAS_DIFF = """diff --git a/plugins/foo/foo.plugin.zsh b/plugins/foo/foo.plugin.zsh
--- a/plugins/foo/foo.plugin.zsh
+++ b/plugins/foo/foo.plugin.zsh
@@ -1,2 +1,3 @@
 # foo plugin
+alias ll='ls -la'
 export FOO=1
"""

BINDKEY_DIFF = """@@ -10,3 +10,3 @@
-bindkey '^R' history-incremental-search-backward
+# bindkey '^R' history-incremental-search-backward
"""


def no_diff(path):
    return ""


def exists_all(path):
    return True


class TestDiffClassifier:
    """Unit tests for DiffClassifier class."""

    def setup_method(self):
        self.classifier = DiffClassifier()

    def test_empty_change_set(self):
        assert self.classifier.classify([], no_diff, exists_all) == frozenset()

    @pytest.mark.parametrize("path", ["lib/git.zsh", "tools/install.sh", "lib/functions.zsh"])
    def test_core_files(self, path):
        labels = self.classifier.classify([path], no_diff, exists_all)
        assert LabelKey.CORE in labels

    @pytest.mark.parametrize("path", ["lib/nested/file.zsh", "libs/git.zsh", "README.md", "lib/"])
    def test_non_core_files(self, path):
        labels = self.classifier.classify([path], no_diff, exists_all)
        assert LabelKey.CORE not in labels

    def test_new_plugin(self):
        exists = Mock(return_value=False)
        labels = self.classifier.classify(["plugins/foo/foo.plugin.zsh"], no_diff, exists)

        assert labels == {LabelKey.PLUGIN, LabelKey.NEW_PLUGIN}
        exists.assert_called_once_with("plugins/foo")

    def test_existing_plugin(self):
        labels = self.classifier.classify(["plugins/foo/foo.plugin.zsh"], no_diff, exists_all)
        assert labels == {LabelKey.PLUGIN}

    def test_plugin_existence_checked_once_per_plugin(self):
        exists = Mock(return_value=True)
        self.classifier.classify(
            ["plugins/foo/foo.plugin.zsh", "plugins/foo/README.md", "plugins/bar/bar.plugin.zsh"],
            no_diff,
            exists,
        )
        assert sorted(call.args[0] for call in exists.call_args_list) == ["plugins/bar", "plugins/foo"]

    def test_new_theme(self):
        exists = Mock(return_value=False)
        labels = self.classifier.classify(["themes/shiny.zsh-theme"], no_diff, exists)

        assert labels == {LabelKey.THEME, LabelKey.NEW_THEME}
        exists.assert_called_once_with("themes/shiny.zsh-theme")

    def test_existing_theme(self):
        labels = self.classifier.classify(["themes/robbyrussell.zsh-theme"], no_diff, exists_all)
        assert labels == {LabelKey.THEME}

    def test_theme_directory_without_theme_file(self):
        labels = self.classifier.classify(["themes/README.md"], no_diff, exists_all)
        assert labels == frozenset()

    @pytest.mark.parametrize("path, expected", [
        ("oh-my-zsh.sh", LabelKey.INIT),
        ("oh-my-zsh..zsh", LabelKey.INIT),
        ("tools/upgrade.sh", LabelKey.UPDATE),
        ("tools/check_for_upgrade.sh", LabelKey.UPDATE),
        ("tools/install.sh", LabelKey.INSTALL),
        ("tools/uninstall.sh", LabelKey.UNINSTALL),
        ("plugins/aws/aws.plugin.zsh", LabelKey.PLUGIN_AWS),
        ("plugins/git/git.plugin.zsh", LabelKey.PLUGIN_GIT),
        ("plugins/mercurial/mercurial.plugin.zsh", LabelKey.PLUGIN_MERCURIAL),
        ("plugins/tmux/tmux.extra.conf", LabelKey.PLUGIN_TMUX),
    ])
    def test_path_rules(self, path, expected):
        assert self.classifier.match_path(path) is expected

    @pytest.mark.parametrize("path", ["oh-my-zsh.zsh", "tools/theme_chooser.sh", "plugins/gitfast/x.zsh"])
    def test_path_rules_no_match(self, path):
        assert self.classifier.match_path(path) is None

    def test_zsh_diff_with_alias(self):
        diff_provider = Mock(return_value=ALIAS_DIFF)
        labels = self.classifier.classify(["plugins/foo/foo.plugin.zsh"], diff_provider, exists_all)

        assert LabelKey.ALIAS in labels
        assert LabelKey.BINDKEY not in labels
        diff_provider.assert_called_once_with("plugins/foo/foo.plugin.zsh")

    def test_zsh_diff_with_commented_bindkey(self):
        labels = self.classifier.classify(["lib/key-bindings.zsh"], lambda path: BINDKEY_DIFF, exists_all)
        assert labels == {LabelKey.CORE, LabelKey.BINDKEY}

    def test_zsh_diff_with_both(self):
        labels = self.classifier.diff_labels(ALIAS_DIFF + BINDKEY_DIFF)
        assert labels == {LabelKey.ALIAS, LabelKey.BINDKEY}

    def test_zsh_diff_unrelated_changes(self):
        diff = "@@ -1 +1 @@\n-export FOO=1\n+export FOO=2\n"
        labels = self.classifier.classify(["lib/misc.zsh"], lambda path: diff, exists_all)
        assert labels == {LabelKey.CORE}

    def test_context_lines_are_ignored(self):
        diff = "@@ -1,2 +1,2 @@\n alias gst='git status'\n-export A=1\n+export A=2\n"
        assert self.classifier.diff_labels(diff) == set()

    def test_diff_only_fetched_for_zsh_files(self):
        diff_provider = Mock(return_value="")
        self.classifier.classify(["README.md", "themes/x.zsh-theme", "_git"], diff_provider, exists_all)
        diff_provider.assert_not_called()

    def test_completion_file(self):
        labels = self.classifier.classify(["_git"], no_diff, exists_all)
        assert labels == {LabelKey.COMPLETION}

    def test_completion_file_in_plugin(self):
        labels = self.classifier.classify(["plugins/docker/_docker"], no_diff, exists_all)
        assert labels == {LabelKey.PLUGIN, LabelKey.COMPLETION}

    def test_zsh_rule_wins_over_completion_rule(self):
        diff_provider = Mock(return_value="")
        labels = self.classifier.classify(["_helpers.zsh"], diff_provider, exists_all)

        assert LabelKey.COMPLETION not in labels
        diff_provider.assert_called_once_with("_helpers.zsh")

    def test_duplicate_files_are_collapsed(self):
        diff_provider = Mock(return_value=ALIAS_DIFF)
        self.classifier.classify(["lib/a.zsh", "lib/a.zsh"], diff_provider, exists_all)
        diff_provider.assert_called_once_with("lib/a.zsh")

    def test_provider_errors_propagate(self):
        def broken(path):
            raise RuntimeError("git diff failed")

        with pytest.raises(RuntimeError):
            self.classifier.classify(["lib/a.zsh"], broken, exists_all)

    def test_end_to_end_label_set(self):
        existing = {"plugins/git"}
        labels = classify(
            ["plugins/git/git.plugin.zsh", "themes/newtheme.zsh-theme"],
            no_diff,
            lambda path: path in existing,
        )
        assert labels == {
            LabelKey.PLUGIN,
            LabelKey.PLUGIN_GIT,
            LabelKey.THEME,
            LabelKey.NEW_THEME,
        }
