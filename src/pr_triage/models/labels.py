"""
Label Catalog

PR에 붙는 라벨의 심볼 키와 표시 이름
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping


class LabelKey(Enum):
    """라벨 심볼 키"""
    CORE = "core"
    INIT = "init"
    INSTALL = "install"
    UPDATE = "update"
    PLUGIN = "plugin"
    THEME = "theme"
    UNINSTALL = "uninstall"
    NEW_PLUGIN = "new_plugin"
    NEW_THEME = "new_theme"
    PLUGIN_AWS = "plugin_aws"
    PLUGIN_GIT = "plugin_git"
    PLUGIN_MERCURIAL = "plugin_mercurial"
    PLUGIN_TMUX = "plugin_tmux"
    ALIAS = "alias"
    BINDKEY = "bindkey"
    COMPLETION = "completion"
    CONFLICTS = "conflicts"


LABEL_CATALOG: Mapping[LabelKey, str] = MappingProxyType({
    LabelKey.CORE: "Area: core",
    LabelKey.INIT: "Area: init",
    LabelKey.INSTALL: "Area: installer",
    LabelKey.UPDATE: "Area: updater",
    LabelKey.PLUGIN: "Area: plugin",
    LabelKey.THEME: "Area: theme",
    LabelKey.UNINSTALL: "Area: uninstaller",
    LabelKey.NEW_PLUGIN: "New: plugin",
    LabelKey.NEW_THEME: "New: theme",
    LabelKey.PLUGIN_AWS: "Plugin: aws",
    LabelKey.PLUGIN_GIT: "Plugin: git",
    LabelKey.PLUGIN_MERCURIAL: "Plugin: mercurial",
    LabelKey.PLUGIN_TMUX: "Plugin: tmux",
    LabelKey.ALIAS: "Topic: alias",
    LabelKey.BINDKEY: "Topic: bindkey",
    LabelKey.COMPLETION: "Topic: completion",
    LabelKey.CONFLICTS: "Status: conflicts",
})


def display_name(key: LabelKey) -> str:
    """라벨 키의 표시 이름 반환 (없으면 KeyError)"""
    return LABEL_CATALOG[key]


CONFLICTS_LABEL = display_name(LabelKey.CONFLICTS)


def display_names(keys: Iterable[LabelKey]) -> List[str]:
    """표시 이름을 정렬해서 반환"""
    return sorted({display_name(key) for key in keys})
