"""
Response templates.

Each key owns a small pool; one entry is picked at random for variety and
filled with ``str.format`` fields. The pick is presentation only, so callers
that need a stable reply (tests) pass their own ``random.Random``.
"""

import random
from typing import Any, Dict, List, Optional

from core.intent import ParsedIntent
from core.intent_kind import IntentKind

TEMPLATES: Dict[str, List[str]] = {
    "greeting": [
        "🌸 こんにちは！私はお守りボットです。日本の伝統的な価値観を大切にしながら、あなたの貯蓄をお手伝いします。\n\n「ヘルプ」と送信すると使い方がわかります。",
        "こんにちは！🌸 私は文化的AI貯蓄コーチです。\n\n目標設定例:\n「Set target ¥50000 Okinawa 60日」\n「¥10000貯めたい東京旅行」\n\n一緒に目標達成しましょう！",
        "🌸 Hello! I am OMAMORI Bot. I help with savings while preserving traditional Japanese values.\n\nSend \"help\" to learn how to use me.",
    ],
    "help": [
        "📋 OMAMORI Bot Commands\n\n"
        "🌸 基本コマンド:\n"
        "• こんにちは - 挨拶\n"
        "• ヘルプ - このメッセージ\n"
        "• ¥1000貯めたい - 貯蓄目標設定\n"
        "• Set target ¥30000 Okinawa 45日 - 期限つき目標\n"
        "• 進捗 - 進捗確認\n\n"
        "👨‍👩‍👧‍👦 家族:\n"
        "• 家族作成 / 家族目標 ¥100000 / 家族進捗\n"
        "• 相続人 0x... - 相続設定\n\n"
        "⛩️ 文化的価値:\n"
        "• もったいない / おもてなし / 協働 / 伝統",
    ],
    "help_inheritance": [
        "👨‍👩‍👧‍👦 相続機能について\n\n"
        "🌸 使い方:\n"
        "• 相続人 0x1234... - 相続人のウォレットアドレス設定\n\n"
        "⚠️ 注意事項:\n"
        "• MetaMaskの秘密鍵管理が重要\n"
        "• 家族との事前相談をお勧めします\n\n"
        "伝統の継承をお手伝いします ⛩️",
    ],
    "savings_goal_set": [
        "{goal}のために¥{amount}を貯めるのは素晴らしい目標ですね！\n\n"
        "🎯 目標日: {target_date}\n⏳ 残り日数: {days_remaining}日\n💰 1日平均: ¥{daily_target}\n\n"
        "日本の「もったいない」精神で、無駄遣いを減らして着実に貯金しましょう。",
        "{goal}の目標が設定されました！\n\n"
        "目標金額: ¥{amount}\n残り日数: {days_remaining}日\n1日平均: ¥{daily_target}\n\n"
        "毎日コツコツと貯蓄を続けましょう 🌸",
    ],
    "savings_goal_expired": [
        "{goal}の目標日 ({target_date}) はもう過ぎています。\n\n"
        "¥{amount}を今日中に貯めるか、新しい日付で目標を設定し直しましょう 🌸",
    ],
    "invalid_timeline": [
        "📅 期限の日付が読み取れませんでした。\n\n"
        "例: 「2026-12-31までに¥50000貯めたい」または「¥30000貯めたい 30日」",
    ],
    "progress": [
        "📊 {goal}の進捗をお知らせします！\n\n"
        "🎯 目標: ¥{amount}\n💰 現在: ¥{saved}\n📈 進捗: {progress}%\n"
        "⏳ 残り日数: {days_remaining}日\n💡 1日あたり: ¥{daily_target}\n\n{encouragement}",
    ],
    "no_target": [
        "まだ目標が設定されていません。\n"
        "「Set target ¥10000 Okinawa 30日」のように送信して目標を設定しましょう！",
    ],
    "cultural:mottainai": [
        "🌸 もったいない精神\n\n無駄をなくし、物を大切にすることで、真の豊かさを手に入れましょう。",
        "「もったいない」の心で、今日も無駄のない一日を。小さな節約が大きな財産になります。 🌸",
    ],
    "cultural:omotenashi": [
        "🌸 おもてなしの心\n\n相手を思いやる気持ちを大切に、みんなで協力して目標を達成しましょう。",
        "「おもてなし」の精神で、家族の将来も大切に。みんなの幸せのための貯蓄です。 ⛩️",
    ],
    "cultural:kyodo": [
        "「協働」の力で、一緒に目標を達成しましょう。お守りがあなたを守ります。 🎌",
    ],
    "cultural:dento": [
        "「伝統」を大切にしながら、現代の技術で賢く貯蓄。先祖の知恵を活かして。 🏯",
    ],
    "cultural:wisdom": [
        "⛩️ 今日の知恵\n\n「塵も積もれば山となる」- 小さな努力の積み重ねが、やがて大きな成果を生み出します。",
        "⛩️ 今日の知恵\n\n「継続は力なり」- 毎日のコツコツとした取り組みが、確実に目標に近づけてくれます。",
    ],
    "family_created": [
        "🌸 家族グループ「{name}」が作成されました！\n\n"
        "このグループで家族の貯蓄目標を共有し、お互いを励まし合いましょう。\n\n"
        "「家族目標 ¥100000」と送信して目標を設定してください。",
    ],
    "family_group_only": [
        "❌ 家族機能は、LINEグループチャット内でのみ利用できます。\n\n"
        "家族をLINEグループに招待してから再度お試しください。",
    ],
    "family_not_found": [
        "❌ 家族グループが見つかりません。\n\n「家族作成」でグループを初期化してください。",
    ],
    "family_joined": [
        "🌸 家族グループに参加しました！\n\nファミリー名: {name}\nメンバー: {members}人\n\n一緒に貯蓄目標を達成しましょう！ 💪",
    ],
    "family_goal_set": [
        "🎯 家族の貯蓄目標が設定されました！\n\n目標金額: ¥{savings_goal}\n現在の進捗: ¥{total_saved}\n\nみんなで協力して頑張りましょう！ 💪",
    ],
    "family_goal_missing_amount": [
        "💰 目標金額を教えてください。\n\n例: 家族目標 ¥100000",
    ],
    "family_progress": [
        "📊 家族の貯蓄進捗\n\n🎯 目標: ¥{savings_goal}\n💰 現在: ¥{total_saved}\n📈 進捗: {progress}%\n👥 メンバー: {members}人\n\n{encouragement}",
    ],
    "family_info_group": [
        "👨‍👩‍👧‍👦 OMAMORI 家族機能\n\n🌸 使い方:\n"
        "• 家族作成 - グループを初期化\n• 家族招待 - グループに参加\n"
        "• 家族目標 ¥100000 - 目標設定\n• 家族進捗 - 現在の状況確認\n"
        "• 相続人 0x... - 相続設定\n\n日本の家族の絆を大切に ⛩️",
    ],
    "family_info_direct": [
        "👨‍👩‍👧‍👦 家族機能を使うには\n\n1. 家族をLINEグループに招待\n2. このボットをグループに追加\n"
        "3. 「家族作成」でスタート\n\nみんなで貯蓄を頑張りましょう！ 🌸",
    ],
    "family_deposit": [
        "🌸 家族の貯蓄が更新されました！\n\n💰 ¥{amount}が追加されました ({asset})\n📊 合計: ¥{total_saved}\n"
        "🎯 目標まで: ¥{remaining}\n📈 進捗: {progress}%\n\n{encouragement}",
    ],
    "deposit": [
        "💰 入金ありがとうございます！\n\n金額: ¥{amount} ({asset})\n合計: ¥{total_saved}\n\nお守りが成長しました！ 🌸✨",
    ],
    "heir_set": [
        "👶 相続人が設定されました\n\n相続人アドレス: {short_address}...\n\n"
        "⚠️ 重要: MetaMaskの秘密鍵を安全に保管し、相続人に伝える方法を検討してください。\n\n"
        "日本の伝統を次世代に継承しましょう 🌸",
    ],
    "unknown": [
        "🌸 すみません、よく分かりませんでした。\n\n「ヘルプ」と送信すると使い方が分かります。\n\n"
        "または、¥1000貯めたい のように金額を教えてください。",
        "貯金の目標を教えてください！例: \"沖縄旅行のために¥50,000貯めたい\"\n\n使い方は「ヘルプ」で確認できます 🌸",
    ],
}

ENCOURAGEMENT_DONE = "🎉 目標達成おめでとうございます！"
ENCOURAGEMENT_KEEP_GOING = "みんなで頑張りましょう！"


def format_yen(value: int) -> str:
    return f"{value:,}"


def encouragement(progress: int) -> str:
    return ENCOURAGEMENT_DONE if progress >= 100 else ENCOURAGEMENT_KEEP_GOING


def select_template(key: str, rng: Optional[random.Random] = None) -> str:
    pool = TEMPLATES.get(key)
    if not pool:
        raise KeyError(f"No response template named {key!r}")
    return (rng or random).choice(pool)


def render(key: str, rng: Optional[random.Random] = None, **fields: Any) -> str:
    """
    Pick a template from ``key``'s pool and fill it.
    ``int`` amount-like fields should be passed through ``format_yen`` first.
    """
    template = select_template(key, rng)
    return template.format(**fields)


def key_for_intent(intent: ParsedIntent) -> str:
    """Template key for intents that need no stored state."""
    if intent.kind is IntentKind.GREETING:
        return "greeting"
    if intent.kind is IntentKind.HELP:
        return "help_inheritance" if intent.topic == "inheritance" else "help"
    if intent.kind is IntentKind.CULTURAL_VALUE and f"cultural:{intent.value}" in TEMPLATES:
        return f"cultural:{intent.value}"
    return "unknown"
