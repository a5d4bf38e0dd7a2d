"""
Diff Classifier

Maps the changed files of a pull request (and, for zsh scripts, their
diff text) to the set of label keys that apply.
"""

import re
import logging
from fnmatch import fnmatchcase
from typing import Callable, Iterable, List, Optional, Set, Tuple, FrozenSet

from ..models.labels import LabelKey


logger = logging.getLogger(__name__)

DiffProvider = Callable[[str], str]
ExistenceChecker = Callable[[str], bool]


# Ordered table, first match per file wins. Patterns use shell-glob
# semantics, so '*' may cross '/'.
PATH_RULES: Tuple[Tuple[Tuple[str, ...], LabelKey], ...] = (
    (("oh-my-zsh.sh", "oh-my-zsh..zsh"), LabelKey.INIT),
    (("tools/*upgrade.sh",), LabelKey.UPDATE),
    (("tools/install.sh",), LabelKey.INSTALL),
    (("tools/uninstall.sh",), LabelKey.UNINSTALL),
    (("plugins/aws/*",), LabelKey.PLUGIN_AWS),
    (("plugins/git/*",), LabelKey.PLUGIN_GIT),
    (("plugins/mercurial/*",), LabelKey.PLUGIN_MERCURIAL),
    (("plugins/tmux/*",), LabelKey.PLUGIN_TMUX),
)

CORE_DIRS = ("lib", "tools")
THEME_SUFFIX = ".zsh-theme"


class DiffClassifier:
    """
    Rule-based pull request classifier.

    Rules are evaluated independently and only ever add keys:
    - area rules (core, plugin, theme, new plugin/theme)
    - per-path table (init, installer, updater, specific plugins)
    - content rules keyed on the base name (alias, bindkey, completion)
    """

    def __init__(self):
        """Initialize diff classifier."""
        self.alias_pattern = re.compile(r'^[-+][ #]*alias ', re.MULTILINE)
        self.bindkey_pattern = re.compile(r'^[-+][ #]*bindkey ', re.MULTILINE)

    def classify(
        self,
        changed_files: Iterable[str],
        diff_provider: DiffProvider,
        exists: ExistenceChecker,
    ) -> FrozenSet[LabelKey]:
        """
        Classify a pull request snapshot.

        Args:
            changed_files: Repository-relative paths changed by the PR
            diff_provider: Returns the unified diff text of one file
            exists: Tells whether a path exists on the base tree

        Returns:
            Set of label keys
        """
        files = list(dict.fromkeys(f for f in changed_files if f))
        logger.info(f"Classifying {len(files)} changed files")

        labels: Set[LabelKey] = set()

        if any(self._is_core_file(f) for f in files):
            labels.add(LabelKey.CORE)

        labels |= self._area_labels(
            self._plugin_dirs(files), exists, LabelKey.PLUGIN, LabelKey.NEW_PLUGIN
        )
        labels |= self._area_labels(
            self._theme_files(files), exists, LabelKey.THEME, LabelKey.NEW_THEME
        )

        for file_path in files:
            path_label = self.match_path(file_path)
            if path_label is not None:
                labels.add(path_label)
            labels |= self._content_labels(file_path, diff_provider)

        logger.info(f"Derived labels: {sorted(key.value for key in labels)}")
        return frozenset(labels)

    def match_path(self, file_path: str) -> Optional[LabelKey]:
        """Return the label of the first per-path rule matching the file."""
        for patterns, label in PATH_RULES:
            if any(fnmatchcase(file_path, pattern) for pattern in patterns):
                return label
        return None

    def diff_labels(self, diff: str) -> Set[LabelKey]:
        """
        Inspect added/removed lines of a diff for alias and bindkey changes.

        Commented-out definitions count as well.
        """
        labels = set()
        if self.alias_pattern.search(diff):
            labels.add(LabelKey.ALIAS)
        if self.bindkey_pattern.search(diff):
            labels.add(LabelKey.BINDKEY)
        return labels

    def _content_labels(self, file_path: str, diff_provider: DiffProvider) -> Set[LabelKey]:
        name = file_path.rsplit('/', 1)[-1]
        if name.endswith('.zsh'):
            return self.diff_labels(diff_provider(file_path))
        if name.startswith('_'):
            return {LabelKey.COMPLETION}
        return set()

    def _area_labels(
        self,
        paths: List[str],
        exists: ExistenceChecker,
        area: LabelKey,
        new: LabelKey,
    ) -> Set[LabelKey]:
        if not paths:
            return set()

        labels = {area}
        for path in paths:
            if not exists(path):
                logger.debug(f"{path} does not exist on base, marking as new")
                labels.add(new)
        return labels

    @staticmethod
    def _is_core_file(file_path: str) -> bool:
        parts = file_path.split('/')
        return len(parts) == 2 and parts[0] in CORE_DIRS and bool(parts[1])

    @staticmethod
    def _plugin_dirs(files: List[str]) -> List[str]:
        """Distinct 'plugins/<name>' directories touched by the PR."""
        dirs = []
        for file_path in files:
            parts = file_path.split('/')
            if len(parts) >= 3 and parts[0] == 'plugins' and parts[1]:
                dirs.append(f"plugins/{parts[1]}")
        return list(dict.fromkeys(dirs))

    @staticmethod
    def _theme_files(files: List[str]) -> List[str]:
        """Distinct 'themes/<name>.zsh-theme' files touched by the PR."""
        return list(dict.fromkeys(
            f for f in files
            if f.startswith('themes/') and f.endswith(THEME_SUFFIX) and len(f) > len('themes/' + THEME_SUFFIX)
        ))


def classify(
    changed_files: Iterable[str],
    diff_provider: DiffProvider,
    exists: ExistenceChecker,
) -> FrozenSet[LabelKey]:
    """Classify with a default classifier."""
    return DiffClassifier().classify(changed_files, diff_provider, exists)
