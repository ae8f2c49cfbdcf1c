# services/flex.py
from typing import Any, Dict
from urllib.parse import urlencode

from configurations.config import WEB_APP_URL
from models.savings import SavingsTarget
from services.templates import format_yen


def build_target_flex(target: SavingsTarget, days_remaining: int) -> Dict[str, Any]:
    """
    Flex-message bubble announcing a new savings target, with a button
    that opens the web app pre-filled with today's deposit.
    """
    query = urlencode({"goal": target.goal, "amount": target.daily_target, "target": target.amount})

    return {
        "type": "flex",
        "altText": f"{target.goal}目標設定: ¥{format_yen(target.amount)}",
        "contents": {
            "type": "bubble",
            "header": {
                "type": "box",
                "layout": "vertical",
                "contents": [
                    {"type": "text", "text": "🎯 目標設定完了", "weight": "bold", "size": "xl", "color": "#1976d2", "align": "center"},
                ],
            },
            "body": {
                "type": "box",
                "layout": "vertical",
                "contents": [
                    {"type": "text", "text": target.goal, "weight": "bold", "size": "lg"},
                    {"type": "text", "text": f"目標金額: ¥{format_yen(target.amount)}", "size": "md", "color": "#666666", "margin": "md"},
                    {"type": "text", "text": f"残り日数: {days_remaining}日", "size": "md", "color": "#ff6b35", "weight": "bold", "margin": "sm"},
                    {"type": "text", "text": f"1日平均: ¥{format_yen(target.daily_target)}", "size": "md", "color": "#4caf50", "margin": "sm"},
                    {"type": "separator", "margin": "lg"},
                    {
                        "type": "text",
                        "text": "もったいない精神で無駄遣いを減らし、\n着実に目標達成しましょう！",
                        "size": "sm",
                        "color": "#666666",
                        "wrap": True,
                        "margin": "lg",
                    },
                ],
            },
            "footer": {
                "type": "box",
                "layout": "vertical",
                "contents": [
                    {
                        "type": "button",
                        "style": "primary",
                        "color": "#1976d2",
                        "action": {
                            "type": "uri",
                            "label": f"今すぐ¥{format_yen(target.daily_target)}貯蓄する",
                            "uri": f"{WEB_APP_URL}/onboarding?{query}",
                        },
                    },
                ],
            },
        },
    }
