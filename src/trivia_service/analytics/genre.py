"""
Keyword genre classification.

A keyword is assigned the first genre (in Genre declaration order) whose
hint vocabulary contains a substring of it. Matching is case-insensitive
for Latin text. Anything unmatched is Genre.OTHER.
"""

from trivia_service.models.enums import Genre


GENRE_HINTS: dict[Genre, tuple[str, ...]] = {
    Genre.FOOD: (
        "食", "料理", "飯", "麺", "ラーメン", "うどん", "そば", "カレー", "寿司", "鍋",
        "焼き", "餃子", "おでん", "ぬか炊き", "ふぐ", "河豚", "鯨", "牡蠣", "海老", "魚",
        "肉", "野菜", "果物", "バナナ", "パン", "菓子", "ケーキ", "アイス", "チョコ",
        "酒", "ビール", "茶", "コーヒー", "味", "弁当",
    ),
    Genre.TOURISM: (
        "観光", "旅", "ホテル", "温泉", "公園", "夜景", "展望", "水族館", "動物園",
        "遊園地", "レトロ", "景色", "花火", "桜", "海", "山", "ビーチ", "キャンプ",
    ),
    Genre.HISTORY: (
        "歴史", "城", "戦", "武士", "侍", "武蔵", "小次郎", "巌流", "幕府", "藩",
        "維新", "江戸", "明治", "大正", "昭和", "古墳", "遺跡", "神社", "寺", "大名",
    ),
    Genre.PLACE: (
        "北九州", "小倉", "門司", "若松", "八幡", "戸畑", "黒崎", "折尾", "関門",
        "下関", "福岡", "博多", "九州", "駅", "町", "市", "区", "島", "川", "港",
    ),
    Genre.CULTURE: (
        "文化", "音楽", "歌", "踊", "太鼓", "祇園", "祭", "映画", "漫画", "アニメ",
        "銀河鉄道", "文学", "小説", "美術", "芸術", "方言", "言葉", "スポーツ",
        "野球", "サッカー", "ゲーム",
    ),
    Genre.INDUSTRY: (
        "産業", "工場", "工業", "製鉄", "鉄", "鋼", "製造", "技術", "企業", "会社",
        "機械", "車", "ロボット", "トイレ", "toto", "化学", "電気", "石炭", "炭鉱",
        "エネルギー", "環境", "リサイクル", "造船",
    ),
}


def classify_genre(keyword: str) -> Genre:
    """Return the genre of a keyword, or Genre.OTHER if no hint matches."""
    normalized = keyword.strip().casefold()
    if not normalized:
        return Genre.OTHER

    for genre, hints in GENRE_HINTS.items():
        if any(hint.casefold() in normalized for hint in hints):
            return genre
    return Genre.OTHER


def list_genres() -> list[str]:
    """All genre labels in display order."""
    return [genre.value for genre in Genre]
