import asyncio
import json
from types import SimpleNamespace

import pytest

from ygocdb.commands.aliases import AliasAction, AliasCommands, parse_alias_command
from ygocdb.commands.cards import CardCommands
from ygocdb.core.aliases import AliasStore
from ygocdb.core.exceptions import ArgumentError, LookupFailure
from ygocdb.core.resolver import QueryResolver
from ygocdb.utils.parser import QueryParser, split_arguments

from conftest import make_card


@pytest.fixture
def store(alias_path):
    alias_path.parent.mkdir(parents=True, exist_ok=True)
    alias_path.write_text(json.dumps({"艾克佐迪亚": ["暗黑大法师"]}, ensure_ascii=False), encoding="utf-8")
    store = AliasStore(alias_path)
    asyncio.run(store.load())
    return store


def _cards(store, cards=None, error=None):
    calls = []

    async def lookup(term):
        calls.append(term)
        if error:
            raise error
        return list(cards or [])

    return CardCommands(QueryResolver(store, lookup)), calls


def test_parse_card_query():
    parser = QueryParser()
    query = parser.parse_card_query("青眼白龙 atk:3000 龙")
    assert (query.name, query.filter_expr, query.limit) == ("青眼白龙", "atk:3000 龙", None)
    query = parser.parse_card_query('"Blue-Eyes White Dragon" light limit:3')
    assert (query.name, query.filter_expr, query.limit) == ("Blue-Eyes White Dragon", "light", 3)
    assert parser.parse_card_query("   ").name == ""


def test_split_arguments_keeps_quoted_phrases():
    assert split_arguments('add "Dark Magician" 黑魔') == ["add", "Dark Magician", "黑魔"]


def test_parse_alias_command():
    assert parse_alias_command("add 艾克佐迪亚 暗黑大法师") == (AliasAction.ADD, ["艾克佐迪亚", "暗黑大法师"])
    assert parse_alias_command("DEL a b")[0] is AliasAction.DELETE
    assert parse_alias_command("reload") == (AliasAction.RELOAD, [])
    with pytest.raises(ArgumentError):
        parse_alias_command("rename a b")
    with pytest.raises(ArgumentError):
        parse_alias_command("")


def test_query_one_formats_first_card(store):
    commands, calls = _cards(store, [make_card(1, "被封印的艾克佐迪亚"), make_card(2, "别的卡")])
    reply = asyncio.run(commands.query_one("暗黑大法师"))
    assert calls == ["艾克佐迪亚"]
    assert "卡片ID: 1" in reply
    assert "被封印的艾克佐迪亚" in reply
    assert "别的卡" not in reply


def test_query_one_not_found(store):
    commands, _ = _cards(store)
    assert asyncio.run(commands.query_one("黑魔术师")) == "未找到卡片：黑魔术师"


def test_query_one_lookup_failure_message(store):
    commands, _ = _cards(store, error=LookupFailure("timeout", subject="艾克佐迪亚"))
    reply = asyncio.run(commands.query_one("暗黑大法师"))
    assert reply == "查询卡片信息时发生错误：艾克佐迪亚"


def test_query_one_requires_name(store):
    commands, calls = _cards(store)
    assert asyncio.run(commands.query_one("")) == "请输入要查询的卡名！"
    assert calls == []


def test_query_many_respects_limit(store):
    cards = [make_card(i, f"卡{i}") for i in range(1, 8)]
    commands, _ = _cards(store, cards)
    reply = asyncio.run(commands.query_many("卡 limit:2"))
    lines = reply.splitlines()
    assert lines[0].startswith("1. [1] 卡1")
    assert lines[1].startswith("2. [2] 卡2")
    assert "共 7 张" in lines[2]


def test_query_many_clamps_limit(store):
    cards = [make_card(i, f"卡{i}") for i in range(1, 8)]
    commands, _ = _cards(store, cards)
    reply = asyncio.run(commands.query_many("卡 limit:50", max_limit=3))
    assert len(reply.splitlines()) == 4
    reply = asyncio.run(commands.query_many("卡", default_limit=10))
    assert len(reply.splitlines()) == 7


def test_alias_commands_round_trip(store, alias_path):
    commands = AliasCommands(store)
    assert asyncio.run(commands.handle("add 青眼白龙 青眼")) == "已添加别名：青眼 -> 青眼白龙"
    assert store.resolve("青眼") == "青眼白龙"
    assert asyncio.run(commands.handle("add 黑魔术师 青眼")) == "别名已被其他卡名占用：青眼 (青眼白龙)"
    assert asyncio.run(commands.handle("delete 青眼白龙 青眼")) == "已删除别名：青眼 -> 青眼白龙"
    assert json.loads(alias_path.read_text(encoding="utf-8")) == {"艾克佐迪亚": ["暗黑大法师"]}


def test_alias_commands_errors(store):
    commands = AliasCommands(store)
    assert asyncio.run(commands.handle("add 艾克佐迪亚 暗黑大法师")).startswith("别名已存在")
    assert asyncio.run(commands.handle("delete 艾克佐迪亚 不存在的别名")).startswith("别名不存在")
    assert asyncio.run(commands.handle("add 只有一个参数")).startswith("参数格式错误")
    assert asyncio.run(commands.handle("frobnicate")).startswith("参数格式错误")
    assert store.snapshot() == {"艾克佐迪亚": ["暗黑大法师"]}


def test_alias_commands_disabled(store):
    commands = AliasCommands(store)
    reply = asyncio.run(commands.handle("add 青眼白龙 青眼", enabled=False))
    assert reply == "别名功能未启用：ckalias"
    assert store.resolve("青眼") == "青眼"


def test_alias_reload_and_list(store, alias_path):
    commands = AliasCommands(store)
    alias_path.write_text(json.dumps({"青眼白龙": ["青眼", "BEWD"]}, ensure_ascii=False), encoding="utf-8")
    assert "共 1 个卡名" in asyncio.run(commands.handle("reload"))
    assert asyncio.run(commands.handle("list")) == "青眼白龙: 青眼, BEWD"
    assert asyncio.run(commands.handle("list 青眼白龙")) == "青眼白龙: 青眼, BEWD"
    assert asyncio.run(commands.handle("list 艾克佐迪亚")) == "艾克佐迪亚 没有别名。"


def test_alias_reload_malformed_file(store, alias_path):
    commands = AliasCommands(store)
    alias_path.write_text("[", encoding="utf-8")
    assert asyncio.run(commands.handle("reload")).startswith("别名文件格式错误")
    assert store.resolve("暗黑大法师") == "艾克佐迪亚"


def test_dispatch_rejects_unknown_action(store):
    commands = AliasCommands(store)
    with pytest.raises(ArgumentError):
        asyncio.run(commands.dispatch(SimpleNamespace(value="rename"), ["a", "b"]))
