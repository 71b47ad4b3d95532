"""🏗️ Інфраструктурні адаптери: URL, парсери, скачування, сховище, сповіщення."""
