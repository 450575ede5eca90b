"""Static display tables: prayer names, UI labels, languages and calculation methods."""

from prayertime.models import PrayerName

FALLBACK_LANGUAGE = "en"

LANGUAGES = {
    "tr": "Türkçe",
    "en": "English",
    "de": "Deutsch",
    "ar": "العربية",
}

PRAYER_DISPLAY = {
    PrayerName.FAJR: {"tr": "İmsak", "en": "Fajr", "de": "Fadschr", "ar": "الفجر"},
    PrayerName.SUNRISE: {"tr": "Güneş", "en": "Sunrise", "de": "Sonnenaufgang", "ar": "الشروق"},
    PrayerName.DHUHR: {"tr": "Öğle", "en": "Dhuhr", "de": "Dhuhr", "ar": "الظهر"},
    PrayerName.ASR: {"tr": "İkindi", "en": "Asr", "de": "Asr", "ar": "العصر"},
    PrayerName.MAGHRIB: {"tr": "Akşam", "en": "Maghrib", "de": "Maghrib", "ar": "المغرب"},
    PrayerName.ISHA: {"tr": "Yatsı", "en": "Isha", "de": "Ischa", "ar": "العشاء"},
}

UI_LABELS = {
    "loading": {"tr": "Yükleniyor...", "en": "Loading...", "de": "Laden...", "ar": "جار التحميل..."},
    "noData": {"tr": "Veri yok", "en": "No data", "de": "Keine Daten", "ar": "لا توجد بيانات"},
    "cached": {"tr": "Önbellek", "en": "Cached", "de": "Zwischengespeichert", "ar": "مخزن مؤقتا"},
    "manualLocation": {
        "tr": "Manuel Konum",
        "en": "Manual Location",
        "de": "Manueller Standort",
        "ar": "الموقع اليدوي",
    },
    "unknown": {"tr": "Bilinmiyor", "en": "Unknown", "de": "Unbekannt", "ar": "غير معروف"},
    "cachedLocation": {
        "tr": "Önbellekli Konum",
        "en": "Cached Location",
        "de": "Zwischengespeicherter Standort",
        "ar": "الموقع المخزن",
    },
    "defaultIstanbul": {
        "tr": "Varsayılan (İstanbul)",
        "en": "Default (Istanbul)",
        "de": "Standard (Istanbul)",
        "ar": "الافتراضي (اسطنبول)",
    },
    "prayerTime": {"tr": "Namaz Vakti", "en": "Prayer Time", "de": "Gebetszeit", "ar": "وقت الصلاة"},
    "prayerReminder": {
        "tr": "Namaz Hatırlatma",
        "en": "Prayer Reminder",
        "de": "Gebetserinnerung",
        "ar": "تذكير الصلاة",
    },
    "timeEntered": {
        "tr": "vakti girdi",
        "en": "time has entered",
        "de": "Zeit ist eingetreten",
        "ar": "قد حان وقت",
    },
    "minutesRemaining": {
        "tr": "dakika kaldı",
        "en": "minutes remaining",
        "de": "Minuten verbleibend",
        "ar": "دقائق متبقية",
    },
    "toTime": {"tr": "vaktine", "en": "until", "de": "bis", "ar": "حتى"},
}

# Aladhan calculation methods
# 13 = Diyanet (Turkey), 3 = MWL, 2 = ISNA, 4 = Makkah, 5 = Egypt
CALCULATION_METHODS = {
    0: "Shia Ithna-Ashari",
    1: "University of Islamic Sciences, Karachi",
    2: "Islamic Society of North America",
    3: "Muslim World League",
    4: "Umm Al-Qura University, Makkah",
    5: "Egyptian General Authority of Survey",
    7: "Institute of Geophysics, University of Tehran",
    8: "Gulf Region",
    9: "Kuwait",
    10: "Qatar",
    11: "Majlis Ugama Islam Singapura",
    12: "Union Organization Islamic de France",
    13: "Diyanet İşleri Başkanlığı (Turkey)",
    14: "Spiritual Administration of Muslims of Russia",
    15: "Moonsighting Committee Worldwide",
}

DEFAULT_METHOD = 13


def label(key: str, language: str) -> str:
    """Return a UI label in the given language, falling back to English, then to the key."""
    table = UI_LABELS.get(key)
    if table is None:
        return key
    return table.get(language) or table.get(FALLBACK_LANGUAGE) or key


def prayer_label(name: PrayerName, language: str) -> str:
    table = PRAYER_DISPLAY[name]
    return table.get(language) or table[FALLBACK_LANGUAGE]


# Monday first, matching datetime.weekday()
WEEKDAYS = {
    "tr": ["Pazartesi", "Salı", "Çarşamba", "Perşembe", "Cuma", "Cumartesi", "Pazar"],
    "en": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
    "de": ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"],
    "ar": ["الاثنين", "الثلاثاء", "الأربعاء", "الخميس", "الجمعة", "السبت", "الأحد"],
}

MONTHS = {
    "tr": ["Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
           "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık"],
    "en": ["January", "February", "March", "April", "May", "June",
           "July", "August", "September", "October", "November", "December"],
    "de": ["Januar", "Februar", "März", "April", "Mai", "Juni",
           "Juli", "August", "September", "Oktober", "November", "Dezember"],
    "ar": ["يناير", "فبراير", "مارس", "أبريل", "مايو", "يونيو",
           "يوليو", "أغسطس", "سبتمبر", "أكتوبر", "نوفمبر", "ديسمبر"],
}

# Long date layout per language
DATE_FORMATS = {
    "tr": "{day} {month} {year} {weekday}",
    "en": "{weekday}, {month} {day}, {year}",
    "de": "{weekday}, {day}. {month} {year}",
    "ar": "{weekday}، {day} {month} {year}",
}


def format_date(day, language: str) -> str:
    """Format a date as a long, localized menu header, e.g. 'Samstag, 1. März 2025'."""
    if language not in DATE_FORMATS:
        language = FALLBACK_LANGUAGE
    return DATE_FORMATS[language].format(
        weekday=WEEKDAYS[language][day.weekday()],
        day=day.day,
        month=MONTHS[language][day.month - 1],
        year=day.year,
    )
