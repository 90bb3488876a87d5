"""Keyword and pattern data used by the intent router.

Kept apart from :mod:`linguachat.routing` so the lists can be reviewed,
versioned and tested on their own.  Bump ``RULES_VERSION`` whenever an entry
is added or removed.  All entries are lower-case; messages are lower-cased
before matching.  Entries cover English and Vietnamese.
"""

from __future__ import annotations

import re

RULES_VERSION = "2024.1"

# Phrases that ask for one of the practice tools.  Any hit forces the
# practice path, even when an FAQ keyword is also present.
TOOL_TRIGGER_PHRASES: tuple[str, ...] = (
    # pronunciation
    "phát âm",
    "pronunciation",
    "cách đọc",
    "đọc như nào",
    # grammar correction
    "kiểm tra ngữ pháp",
    "grammar check",
    "sửa ngữ pháp",
    "ngữ pháp của",
    # translation
    "dịch",
    "translate",
    "dịch sang",
    "dịch câu",
    # quiz / vocabulary
    "quiz",
    "bài tập",
    "vocabulary quiz",
    "từ vựng",
    # definitions
    "nghĩa của từ",
    "define",
    "definition",
    "từ này có nghĩa",
)

FAQ_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"tôi muốn hỏi.*lộ trình",
        r"cho tôi biết.*lộ trình",
        r"lộ trình.*người mới",
        r"kế hoạch.*học tập",
        r"gói.*học",
        r"giá.*bao nhiêu",
        r"làm sao.*đăng ký",
        r"thông tin.*liên hệ",
        r"what.*price",
        r"how.*subscribe",
        r"learning.*roadmap",
        r"study.*plan",
        r"contact.*information",
    )
)

FAQ_KEYWORDS: tuple[str, ...] = (
    # pricing and plans
    "price",
    "cost",
    "plan",
    "subscription",
    "pricing",
    "features",
    "benefit",
    "how to subscribe",
    "what is the price",
    "what are the features",
    "giá cả",
    "chi phí",
    "gói học",
    "đăng ký",
    "bảng giá",
    "tính năng",
    "lợi ích",
    "làm sao để đăng ký",
    "giá bao nhiêu",
    "có những tính năng gì",
    "gói subscription",
    # support and contact
    "contact",
    "support",
    "phone",
    "email",
    "help desk",
    "how to contact",
    "liên hệ",
    "hỗ trợ",
    "điện thoại",
    "trợ giúp",
    "cách liên hệ",
    "thông tin liên hệ",
    "hỗ trợ khách hàng",
    # roadmap and courses
    "roadmap",
    "learning path",
    "study plan",
    "course",
    "how to learn",
    "lộ trình",
    "lộ trình học",
    "kế hoạch học",
    "khóa học",
    "cách học",
    "lộ trình học tập",
    "người mới bắt đầu",
    "kế hoạch học tập",
    # troubleshooting
    "troubleshoot",
    "problem",
    "issue",
    "khắc phục",
    "vấn đề",
    "sự cố",
)
