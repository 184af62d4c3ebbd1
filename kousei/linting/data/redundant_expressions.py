"""Tautological expressions (二重表現) and their concise replacements."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RedundantEntry:
    pattern: str
    suggestion: str
    description_ja: str


REDUNDANT_EXPRESSIONS: tuple[RedundantEntry, ...] = (
    RedundantEntry("頭痛が痛い", "頭が痛い", "「頭痛」に「痛い」の意味が含まれています"),
    RedundantEntry("一番最初", "最初", "「一番」と「最初」は同じ意味です"),
    RedundantEntry("まず最初に", "まず", "「まず」と「最初に」は同じ意味です"),
    RedundantEntry("後で後悔", "後悔", "「後悔」に「後で」の意味が含まれています"),
    RedundantEntry("犯罪を犯す", "罪を犯す", "「犯罪」と「犯す」で意味が重複しています"),
    RedundantEntry("返事を返す", "返事をする", "「返事」と「返す」で意味が重複しています"),
    RedundantEntry("被害を被る", "被害を受ける", "「被害」と「被る」で意味が重複しています"),
    RedundantEntry("違和感を感じる", "違和感がある", "「違和感」と「感じる」で意味が重複しています"),
    RedundantEntry("馬から落馬", "落馬する", "「落馬」に「馬から落ちる」の意味が含まれています"),
    RedundantEntry("日本に来日", "来日する", "「来日」に「日本に来る」の意味が含まれています"),
    RedundantEntry("歌を歌う", "歌う", "「歌」と「歌う」で意味が重複しています"),
    RedundantEntry("挙式を挙げる", "挙式する", "「挙式」と「挙げる」で意味が重複しています"),
    RedundantEntry("過半数を超える", "半数を超える", "「過半数」に「超える」の意味が含まれています"),
    RedundantEntry("必ず必要", "必要", "「必ず」と「必要」で意味が重複しています"),
    RedundantEntry("各々それぞれ", "それぞれ", "「各々」と「それぞれ」は同じ意味です"),
    RedundantEntry("あらかじめ予約", "予約する", "「予約」に「あらかじめ」の意味が含まれています"),
    RedundantEntry("今の現状", "現状", "「今の」と「現状」で意味が重複しています"),
    RedundantEntry("元旦の朝", "元旦", "「元旦」に「朝」の意味が含まれています"),
    RedundantEntry("最後の切り札", "切り札", "「切り札」に「最後の」の意味が含まれています"),
    RedundantEntry("射程距離", "射程", "「射程」に「距離」の意味が含まれています"),
    RedundantEntry(
        "思いがけないハプニング",
        "ハプニング",
        "「ハプニング」に「思いがけない」の意味が含まれています",
    ),
    RedundantEntry("内定が決まる", "内定する", "「内定」に「決まる」の意味が含まれています"),
    RedundantEntry("旅行に行く", "旅行する", "「旅行」と「行く」で意味が重複しています"),
    RedundantEntry(
        "断トツの1位",
        "断トツ",
        "「断トツ」は「断然トップ」の略で「1位」の意味を含みます",
    ),
    RedundantEntry("第1号", "1号", "「第」と「号」で序数の意味が重複しています"),
)
