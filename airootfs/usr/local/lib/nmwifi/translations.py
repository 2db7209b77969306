"""nmwifi - Internationalization translations.

Provides translations for 6 languages: English, Spanish, French,
German, Chinese (Simplified), and Japanese.  Strings may contain
``str.format`` placeholders such as ``{ssid}``.
"""

import locale
import os

TRANSLATIONS = {
    'English': {
        'title': 'Wi-Fi Networks',
        'scanning': 'Scanning...',
        'connecting': 'Connecting to {ssid}...',
        'verifying': 'Verifying password...',
        'disconnecting': 'Disconnecting...',
        'forgetting': 'Forgetting {ssid}...',
        'loading_details': 'Reading connection details...',
        'connected_to': 'Connected to {ssid}',
        'connect_failed': 'Failed to connect to {ssid}: {error}',
        'wrong_password': 'Wrong password for {ssid}',
        'error': 'Error: {error}',
        'disconnected': 'Disconnected',
        'forgotten': 'Network forgotten',
        'help_browse': 'r: Rescan | i: Interface | Enter: Connect | q: Quit',
        'full_ssid': 'Full SSID: {ssid}',
        'press_any_key': '(Press any key)',
        'password': 'Password',
        'password_hint': 'Enter: Connect | Tab: Show/Hide | Esc: Cancel',
        'empty_password': 'Password cannot be empty',
        'connect_to': 'Connect to {ssid}',
        'select_action': 'Select action',
        'disconnect': 'Disconnect',
        'forget': 'Forget',
        'details': 'Details',
        'cancel': 'Cancel',
        'select_interface': 'Select interface',
        'interface_hint': 'Enter: Use interface | Esc: Cancel',
        'using_interface': 'Using interface {device}',
        'no_devices': 'No Wi-Fi device found',
        'single_device': 'Only one Wi-Fi device available: {device}',
        'no_networks': 'No networks found',
        'not_connected': 'Not connected',
        'ssid': 'SSID',
        'signal': 'Signal',
        'security': 'Security',
        'ip_address': 'IP address',
        'gateway': 'Gateway',
        'dns': 'DNS',
        'mac_address': 'MAC address',
        'device': 'Device',
    },

    'Español': {
        'title': 'Redes Wi-Fi',
        'scanning': 'Buscando...',
        'connecting': 'Conectando a {ssid}...',
        'verifying': 'Verificando contraseña...',
        'disconnecting': 'Desconectando...',
        'forgetting': 'Olvidando {ssid}...',
        'loading_details': 'Leyendo detalles de la conexión...',
        'connected_to': 'Conectado a {ssid}',
        'connect_failed': 'No se pudo conectar a {ssid}: {error}',
        'wrong_password': 'Contraseña incorrecta para {ssid}',
        'error': 'Error: {error}',
        'disconnected': 'Desconectado',
        'forgotten': 'Red olvidada',
        'help_browse': 'r: Buscar | i: Interfaz | Enter: Conectar | q: Salir',
        'full_ssid': 'SSID completo: {ssid}',
        'press_any_key': '(Pulse cualquier tecla)',
        'password': 'Contraseña',
        'password_hint': 'Enter: Conectar | Tab: Mostrar/Ocultar | Esc: Cancelar',
        'empty_password': 'La contraseña no puede estar vacía',
        'connect_to': 'Conectar a {ssid}',
        'select_action': 'Seleccione una acción',
        'disconnect': 'Desconectar',
        'forget': 'Olvidar',
        'details': 'Detalles',
        'cancel': 'Cancelar',
        'select_interface': 'Seleccione interfaz',
        'interface_hint': 'Enter: Usar interfaz | Esc: Cancelar',
        'using_interface': 'Usando la interfaz {device}',
        'no_devices': 'No se encontró ningún dispositivo Wi-Fi',
        'single_device': 'Solo hay un dispositivo Wi-Fi: {device}',
        'no_networks': 'No se encontraron redes',
        'not_connected': 'Sin conexión',
        'ssid': 'SSID',
        'signal': 'Señal',
        'security': 'Seguridad',
        'ip_address': 'Dirección IP',
        'gateway': 'Puerta de enlace',
        'dns': 'DNS',
        'mac_address': 'Dirección MAC',
        'device': 'Dispositivo',
    },

    'Français': {
        'title': 'Réseaux Wi-Fi',
        'scanning': 'Recherche...',
        'connecting': 'Connexion à {ssid}...',
        'verifying': 'Vérification du mot de passe...',
        'disconnecting': 'Déconnexion...',
        'forgetting': 'Suppression de {ssid}...',
        'loading_details': 'Lecture des détails de connexion...',
        'connected_to': 'Connecté à {ssid}',
        'connect_failed': 'Échec de la connexion à {ssid} : {error}',
        'wrong_password': 'Mot de passe incorrect pour {ssid}',
        'error': 'Erreur : {error}',
        'disconnected': 'Déconnecté',
        'forgotten': 'Réseau oublié',
        'help_browse': 'r: Rechercher | i: Interface | Entrée: Connecter | q: Quitter',
        'full_ssid': 'SSID complet : {ssid}',
        'press_any_key': '(Appuyez sur une touche)',
        'password': 'Mot de passe',
        'password_hint': 'Entrée: Connecter | Tab: Afficher/Masquer | Échap: Annuler',
        'empty_password': 'Le mot de passe ne peut pas être vide',
        'connect_to': 'Connexion à {ssid}',
        'select_action': 'Choisir une action',
        'disconnect': 'Déconnecter',
        'forget': 'Oublier',
        'details': 'Détails',
        'cancel': 'Annuler',
        'select_interface': "Choisir l'interface",
        'interface_hint': "Entrée: Utiliser l'interface | Échap: Annuler",
        'using_interface': "Utilisation de l'interface {device}",
        'no_devices': 'Aucun périphérique Wi-Fi trouvé',
        'single_device': 'Un seul périphérique Wi-Fi disponible : {device}',
        'no_networks': 'Aucun réseau trouvé',
        'not_connected': 'Non connecté',
        'ssid': 'SSID',
        'signal': 'Signal',
        'security': 'Sécurité',
        'ip_address': 'Adresse IP',
        'gateway': 'Passerelle',
        'dns': 'DNS',
        'mac_address': 'Adresse MAC',
        'device': 'Périphérique',
    },

    'Deutsch': {
        'title': 'WLAN-Netzwerke',
        'scanning': 'Suche...',
        'connecting': 'Verbinde mit {ssid}...',
        'verifying': 'Passwort wird geprüft...',
        'disconnecting': 'Trenne Verbindung...',
        'forgetting': '{ssid} wird vergessen...',
        'loading_details': 'Verbindungsdetails werden gelesen...',
        'connected_to': 'Verbunden mit {ssid}',
        'connect_failed': 'Verbindung mit {ssid} fehlgeschlagen: {error}',
        'wrong_password': 'Falsches Passwort für {ssid}',
        'error': 'Fehler: {error}',
        'disconnected': 'Getrennt',
        'forgotten': 'Netzwerk vergessen',
        'help_browse': 'r: Suchen | i: Schnittstelle | Enter: Verbinden | q: Beenden',
        'full_ssid': 'Vollständige SSID: {ssid}',
        'press_any_key': '(Beliebige Taste drücken)',
        'password': 'Passwort',
        'password_hint': 'Enter: Verbinden | Tab: Anzeigen/Verbergen | Esc: Abbrechen',
        'empty_password': 'Das Passwort darf nicht leer sein',
        'connect_to': 'Verbinden mit {ssid}',
        'select_action': 'Aktion wählen',
        'disconnect': 'Trennen',
        'forget': 'Vergessen',
        'details': 'Details',
        'cancel': 'Abbrechen',
        'select_interface': 'Schnittstelle wählen',
        'interface_hint': 'Enter: Schnittstelle verwenden | Esc: Abbrechen',
        'using_interface': 'Verwende Schnittstelle {device}',
        'no_devices': 'Kein WLAN-Gerät gefunden',
        'single_device': 'Nur ein WLAN-Gerät verfügbar: {device}',
        'no_networks': 'Keine Netzwerke gefunden',
        'not_connected': 'Nicht verbunden',
        'ssid': 'SSID',
        'signal': 'Signal',
        'security': 'Sicherheit',
        'ip_address': 'IP-Adresse',
        'gateway': 'Gateway',
        'dns': 'DNS',
        'mac_address': 'MAC-Adresse',
        'device': 'Gerät',
    },

    '中文': {
        'title': 'Wi-Fi 网络',
        'scanning': '正在扫描...',
        'connecting': '正在连接 {ssid}...',
        'verifying': '正在验证密码...',
        'disconnecting': '正在断开...',
        'forgetting': '正在忘记 {ssid}...',
        'loading_details': '正在读取连接详情...',
        'connected_to': '已连接到 {ssid}',
        'connect_failed': '无法连接到 {ssid}：{error}',
        'wrong_password': '{ssid} 的密码错误',
        'error': '错误：{error}',
        'disconnected': '已断开',
        'forgotten': '已忘记网络',
        'help_browse': 'r: 扫描 | i: 接口 | Enter: 连接 | q: 退出',
        'full_ssid': '完整 SSID：{ssid}',
        'press_any_key': '（按任意键）',
        'password': '密码',
        'password_hint': 'Enter: 连接 | Tab: 显示/隐藏 | Esc: 取消',
        'empty_password': '密码不能为空',
        'connect_to': '连接到 {ssid}',
        'select_action': '选择操作',
        'disconnect': '断开',
        'forget': '忘记',
        'details': '详情',
        'cancel': '取消',
        'select_interface': '选择接口',
        'interface_hint': 'Enter: 使用接口 | Esc: 取消',
        'using_interface': '正在使用接口 {device}',
        'no_devices': '未找到 Wi-Fi 设备',
        'single_device': '只有一个 Wi-Fi 设备：{device}',
        'no_networks': '未找到网络',
        'not_connected': '未连接',
        'ssid': 'SSID',
        'signal': '信号',
        'security': '安全',
        'ip_address': 'IP 地址',
        'gateway': '网关',
        'dns': 'DNS',
        'mac_address': 'MAC 地址',
        'device': '设备',
    },

    '日本語': {
        'title': 'Wi-Fi ネットワーク',
        'scanning': 'スキャン中...',
        'connecting': '{ssid} に接続中...',
        'verifying': 'パスワードを確認中...',
        'disconnecting': '切断中...',
        'forgetting': '{ssid} を削除中...',
        'loading_details': '接続情報を取得中...',
        'connected_to': '{ssid} に接続しました',
        'connect_failed': '{ssid} に接続できません: {error}',
        'wrong_password': '{ssid} のパスワードが違います',
        'error': 'エラー: {error}',
        'disconnected': '切断しました',
        'forgotten': 'ネットワークを削除しました',
        'help_browse': 'r: 再スキャン | i: インターフェース | Enter: 接続 | q: 終了',
        'full_ssid': 'SSID 全体: {ssid}',
        'press_any_key': '（任意のキーを押してください）',
        'password': 'パスワード',
        'password_hint': 'Enter: 接続 | Tab: 表示/非表示 | Esc: キャンセル',
        'empty_password': 'パスワードを入力してください',
        'connect_to': '{ssid} に接続',
        'select_action': '操作を選択',
        'disconnect': '切断',
        'forget': '削除',
        'details': '詳細',
        'cancel': 'キャンセル',
        'select_interface': 'インターフェースを選択',
        'interface_hint': 'Enter: 使用 | Esc: キャンセル',
        'using_interface': 'インターフェース {device} を使用',
        'no_devices': 'Wi-Fi デバイスが見つかりません',
        'single_device': 'Wi-Fi デバイスは 1 つだけです: {device}',
        'no_networks': 'ネットワークが見つかりません',
        'not_connected': '未接続',
        'ssid': 'SSID',
        'signal': '信号',
        'security': 'セキュリティ',
        'ip_address': 'IP アドレス',
        'gateway': 'ゲートウェイ',
        'dns': 'DNS',
        'mac_address': 'MAC アドレス',
        'device': 'デバイス',
    },
}


def detect_system_language():
    """Detect the system language from environment variables.

    Returns:
        The language name matching available translations, or 'English'.
    """
    lang_code = None
    for var in ['LC_ALL', 'LC_MESSAGES', 'LANG', 'LANGUAGE']:
        lang_code = os.environ.get(var)
        if lang_code:
            break

    if not lang_code:
        try:
            lang_tuple = locale.getlocale(locale.LC_MESSAGES)
            if lang_tuple and lang_tuple[0]:
                lang_code = lang_tuple[0]
        except (ValueError, AttributeError):
            pass

    if not lang_code:
        return 'English'

    lang_prefix = lang_code.split('_')[0].split('.')[0].lower()

    lang_map = {
        'en': 'English',
        'es': 'Español',
        'fr': 'Français',
        'de': 'Deutsch',
        'zh': '中文',
        'ja': '日本語',
    }

    return lang_map.get(lang_prefix, 'English')


def get_text(key, language='English', **kwargs):
    """Retrieve a translated string for the given key and language.

    Args:
        key: The translation key to look up.
        language: The language name (default: 'English').
        **kwargs: Values for the string's format placeholders.

    Returns:
        The translated string, or the English fallback, or the key itself.
    """
    lang_dict = TRANSLATIONS.get(language, TRANSLATIONS['English'])
    text = lang_dict.get(key, TRANSLATIONS['English'].get(key, key))
    return text.format(**kwargs) if kwargs else text
