import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ygocdb.core.models import Card


def make_card(card_id=1, cn_name="测试卡", types="[怪兽|效果] 机械/地\n[★4] 1900/1200", description="效果文本", **kwargs) -> Card:
    return Card(id=card_id, cn_name=cn_name, types=types, description=description, **kwargs)


@pytest.fixture
def card_factory():
    return make_card


@pytest.fixture
def alias_path(tmp_path):
    return tmp_path / "data" / "aliases.json"
