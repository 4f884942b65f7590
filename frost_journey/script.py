"""Narrative content of the journey: scene text, artifacts, phrases, fallbacks.

Renderers fetch these through content() (GET /api/script); the engine only needs
the sizes (12 artifacts, 7 phrases) and the fixed reply texts.
"""

from __future__ import annotations

from frost_journey.models import SceneId, ScriptContent

CHARACTER_NAME = "弗洛斯特"
AUTHOR = "罗杰 · 泽拉兹尼"
TITLE = "趁生命气息逗留"

SCENE_TEXT: dict[SceneId, list[str]] = {
    SceneId.TITLE: [
        "他们叫他弗洛斯特。在上界司命所创造的一切事物中，",
        "弗洛斯特是最完美的，最有威力的，也是最难以理解的。",
        "当你完成全部的旅程后，你将和弗洛斯特对话……",
    ],
    SceneId.VIGIL: [
        "一万年来，弗洛斯特始终盘踞在地球的北极，北半球哪怕飘落一片雪花都逃不过他的耳目。",
        "他指挥并监控着数以千计的重建设备和维护设备的运行。",
    ],
    SceneId.SURVEY: [
        "事情是这样开始的：他将整个北极圈划分成一个个小方块，",
        "开始一平方英寸接一平方英寸地探索这个地区。至于原因，",
        "没有什么特别的，除了一点：他想这么做。",
    ],
    SceneId.INVENTORY: [
        "过了几个世纪，弗洛斯特发现了一些物品：",
        "十分原始的刀子，有雕饰的象牙，诸如此类。",
    ],
    SceneId.QUESTION: ["人是什么？"],
    SceneId.INTERLUDE: ["弗洛斯特决定，去成为一个人。"],
    SceneId.PASSAGE: [],  # revealed line by line, see PASSAGE_LINES
    SceneId.CONVERSATION: [],  # revealed after the portrait, see CONVERSATION_LINES
}

BUTTON_LABELS: dict[str, str] = {
    "begin": "追寻弗洛斯特的旅程",
    "explore": "探索",
    "discover": "发现物品",
    "count": "清点物品",
    "explore_more": "继续探索物品",
    "explored": "探索完毕",
    "abandon": "放弃探索",
    "continue": "继续探索",
    "back": "返回起点",
    "send": "发送",
}

ARTIFACTS: tuple[str, ...] = (
    "十分原始的刀子",
    "雕刻的象牙",
    "几只破浴缸",
    "一批儿童故事实体书",
    "珠宝",
    "餐具",
    "完好的浴缸",
    "一部交响曲的片段章节",
    "十七颗纽扣",
    "三个皮带扣",
    "一座方尖碑的上半截",
    "半个马桶垫圈",
)

# Two artifacts are already listed when the inventory opens.
ARTIFACTS_INITIAL = 2

PHRASES: tuple[str, ...] = (
    "人创造了逻辑，\n因此高于逻辑",
    "人可以制造工具，\n但无法真正感知这些数值",
    "人感知的不是\n英寸、米、磅和加仑",
    "人只感到热，感到冷，\n感到轻重",
    "人不能感知度量",
    "人还懂得恨和爱、骄傲和绝望，\n这些事物是无法度量的",
    "人的感受是无法以公式计算的，\n情绪也没有换算因数",
)

PASSAGE_LINES: tuple[tuple[str, str], ...] = (
    ("line_1", "他穿越冰原，向南而去。"),
    ("line_2", "他读完了人留下的每一本书，听完了每一段残存的乐章。"),
    ("line_3", "他试着去感受冷，去感受热，去感受轻与重。"),
    ("line_4", "然后，他停了下来，等待有人来回答他。"),
)

CONVERSATION_LINES: tuple[tuple[str, str], ...] = (
    ("line_a", "这就是弗洛斯特。"),
    ("line_b", "他在等你开口。"),
    ("input_panel", ""),
)

WORKING_PLACEHOLDER = "弗洛斯特正在思考……"
REPLY_FALLBACK = "风雪太大了，弗洛斯特没有听清。请再说一次。"
EMPTY_REPLY_FALLBACK = "弗洛斯特沉默了很久，什么也没有说。"
REPLY_TEMPERATURE = 0.8


def content() -> ScriptContent:
    return ScriptContent(
        title=TITLE,
        author=AUTHOR,
        character=CHARACTER_NAME,
        scenes=SCENE_TEXT,
        buttons=BUTTON_LABELS,
        artifacts=list(ARTIFACTS),
        phrases=list(PHRASES),
        passage_lines=dict(PASSAGE_LINES),
        conversation_lines=dict(CONVERSATION_LINES),
        working_placeholder=WORKING_PLACEHOLDER,
    )
