"""
quizdetect.constants
常量定义：选择器目录、启发式参数、触发按钮与提示框标识、默认设置等。
"""

# 各内容角色的选择器（按优先级排列，靠前者优先）
SELECTORS = {
    "question": [
        "#question_only",
        "#div_question #question_only",
        "#div_question",
        "[data-component='question-body']",
        ".question-stem",
        ".question-text",
        "#question-body",
        ".questionBody",
        ".question",
        "main article",
        "[class*='question'] [class*='body']",
        "[data-cy='question-text']",
        "article [class*='prompt']",
    ],
    "answer": [
        "#div_question .alert.alert-success",
        "#div_question .alert-success",
        ".alert.alert-success",
        "#div_question .alert.alert-danger",
        "#div_question .alert-danger",
        ".alert.alert-danger",
        "[data-component='answer']",
        ".answer-reveal",
        "#answer",
        ".answer",
        ".explanation",
        ".rationale",
        ".answer-panel",
        "[class*='explanation']",
        "[data-cy='answer']",
        "details[open] .accordion-body",
    ],
    "options": [
        "#div_question .list-group",
        "#div_question .list-group-item",
        ".list-group",
        "[data-component='answer-options']",
        ".answers-list",
        ".answer-options",
        ".option-list",
        ".options",
        "ul",
        "ol",
        "[data-cy='answer-options']",
        "[class*='choices']",
    ],
}

# 启发式兜底的角色参数（选项列表没有兜底）
HEURISTICS = {
    "question": {
        "keywords": ["question"],
        "min_chars": 30,
        "max_chars": 20000,
    },
    "answer": {
        "keywords": [
            "explanation",
            "rationale",
            "correct answer",
            "incorrect",
            "correct",
            "your answer",
            "answer",
        ],
        "min_chars": 60,
        "max_chars": 60000,
    },
}

# 启发式扫描的结构容器
SCAN_CONTAINERS = "section, article, main, aside, details, div"

# 打分常量（可通过 HeuristicConfig 覆盖）
SCORE_DEPTH_WEIGHT = 2.0
SCORE_LENGTH_TARGET = 800
SCORE_LENGTH_CAP = 2000
DEPTH_LIMIT = 80

# 作答结果提示框：先 success 后 danger；通用 alert 仅用于内容提取
ALERT_SUCCESS_SELECTORS = ["#div_question .alert.alert-success", ".alert.alert-success"]
ALERT_DANGER_SELECTORS = ["#div_question .alert.alert-danger", ".alert.alert-danger"]
ALERT_GENERIC_SELECTORS = ["#div_question .alert[role='alert']", ".alert[role='alert']"]

QUESTION_CONTAINER = "#div_question"
QUESTION_ANCHOR = "#question_only"
SUBMIT_BUTTON = "#submit_answer"

OPTION_NODES = "a.list-group-item, label.list-group-item"
ANSWER_OPTION_NODES = "a.list-group-item"
OPTION_TEXT_NODES = "a.list-group-item, li, [role='option'], .answer-option, .option, label, a"
POPULARITY_BADGES = ["[id^='popularity_badge']", ".score-badge"]

# 选项“已判分”样式标记（内联 style 小写后子串匹配 / class 命中）
RESULT_STYLE_MARKERS = ["greenbar.png", "redbar.png", "solid green", "solid red", "border-left"]
RESULT_STYLE_CLASSES = ["bg-success", "bg-danger", "list-group-item-success", "list-group-item-danger"]
CORRECT_STYLE_MARKERS = ["greenbar.png", "solid green"]
CORRECT_STYLE_CLASSES = ["bg-success", "list-group-item-success"]

# 导出时从解释 HTML 中剔除的辅助控件（评分/百分位）
AUX_WIDGET_SELECTORS = [
    "#question_concept_rating_div",
    "#question_concept_percentile_div",
    ".rate_question_concept",
]

SIGNATURE_CHARS = 120
SIGNATURE_SEPARATOR = "::"

QUIET_MS = 250
NOTICE_MS = 3000

TRIGGER_ID = "pm-anki-button"
TRIGGER_LABEL = "Add to Anki"
TRIGGER_ACTION = "export"
NOTICE_ID = "pm-anki-toast"

# 页面 postMessage 调试通道的标记键
DEBUG_MARKER = "__passmed2anki"

DEFAULT_SETTINGS = {
    "deckName": "Passmedicine",
    "noteType": "Basic",
    "tags": "passmedicine,passmed2anki",
}
PROVENANCE_TAG = "passmedicine"
BACK_SEPARATOR = "<br><br>"

ANKI_CONNECT_ENDPOINT = "http://127.0.0.1:8765"
ANKI_CONNECT_VERSION = 6
EXPORT_REQUEST = "EXPORT_REQUEST"
