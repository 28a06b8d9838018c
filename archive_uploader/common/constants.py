"""Constants for archive naming, wiki endpoints and edit summaries."""

# Short archive code -> full archive name, as used on uk.wikisource archive pages
ARCHIVES: dict[str, str] = {
    # Central state archives
    "ЦДАВО": "Центральний державний архів вищих органів влади та управління України",
    "ЦДІАК": "Центральний державний історичний архів України, м. Київ",
    "ЦДІАЛ": "Центральний державний історичний архів України, м. Львів",
    "ЦДАГО": "Центральний державний архів громадських об'єднань та україніки",
    "ЦДАМЛМ": "Центральний державний архів-музей літератури і мистецтва України",
    "ЦДКФФА": "Центральний державний кінофотофоноархів України імені Г. С. Пшеничного",
    "ЦДНТА": "Центральний державний науково-технічний архів України",
    "ЦДЕА": "Центральний державний електронний архів України",
    # Regional state archives
    "ДААРК": "Державний архів в Автономній Республіці Крим",
    "ДАВіО": "Державний архів Вінницької області",
    "ДАВО": "Державний архів Волинської області",
    "ДАДнО": "Державний архів Дніпропетровської області",
    "ДАДО": "Державний архів Донецької області",
    "ДАЖО": "Державний архів Житомирської області",
    "ДАЗО": "Державний архів Закарпатської області",
    "ДАЗпО": "Державний архів Запорізької області",
    "ДАІФО": "Державний архів Івано-Франківської області",
    "ДАКО": "Державний архів Київської області",
    "ДАК": "Державний архів міста Києва",
    "ДАКрО": "Державний архів Кіровоградської області",
    "ДАЛО": "Державний архів Львівської області",
    "ДАЛуО": "Державний архів Луганської області",
    "ДАМО": "Державний архів Миколаївської області",
    "ДАОО": "Державний архів Одеської області",
    "ДАПО": "Державний архів Полтавської області",
    "ДАРО": "Державний архів Рівненської області",
    "ДАСО": "Державний архів Сумської області",
    "ДАТО": "Державний архів Тернопільської області",
    "ДАХО": "Державний архів Харківської області",
    "ДАХеО": "Державний архів Херсонської області",
    "ДАХмО": "Державний архів Хмельницької області",
    "ДАЧкО": "Державний архів Черкаської області",
    "ДАЧвО": "Державний архів Чернівецької області",
    "ДАЧнО": "Державний архів Чернігівської області",
    "ДАМС": "Державний архів міста Севастополя",
}

# Page hierarchy
ARCHIVE_PAGE_PREFIX = "Архів:"
FILE_PAGE_PREFIX = "File:"

# Archive listing pages are split by fund prefix; central archives are not split
SOVIET_FUND_PREFIX = "Р"
PARTY_FUND_PREFIX = "П"
PRE_SOVIET_LISTING_SUFFIX = "Д"
UNSPLIT_ARCHIVE_MARKER = ":ЦД"

# Table column headers filled from the file name
TITLE_COLUMNS = frozenset({"Назва"})
DATE_COLUMNS = frozenset({"Рік", "Роки", "Дата"})

# Wiki endpoints
DEFAULT_SOURCES_HOST = "uk.wikisource.org"
DEFAULT_COMMONS_HOST = "commons.wikimedia.org"
DEFAULT_API_PATH = "/w/"
DEFAULT_USER_AGENT = "ChunkedUploader/1.0"

# Stash upload
CHUNK_SIZE = 5 * 1024 * 1024
UPLOAD_TIMEOUT_SECONDS = 3 * 60
UPLOAD_COMMENT = "Uploaded via script"
UPLOAD_RESULT_CONTINUE = "Continue"
UPLOAD_RESULT_SUCCESS = "Success"

# Edit summaries
SUMMARY_CREATE_FUND = "Створення сторінки фонду {fund}"
SUMMARY_CREATE_DESCRIPTION = "Створення сторінки опису {description}"
SUMMARY_CREATE_CASE = "Створення сторінки справи {case_name}"
SUMMARY_TABLE_REFORMATTED = "Відформатовано таблицю."
SUMMARY_TABLE_ITEM_ADDED = "Додано новий елемент до таблиці та відформатовано."
SUMMARY_FILE_DESCRIPTION = "Add file description and license"
SUMMARY_SOFT_DELETE = "Видалення сторінки"
SOFT_DELETE_TEMPLATE = "{{швидко|видалення сторінки перенаправлення}}"
