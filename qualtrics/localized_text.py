# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Helpers for localized text, the language code to string mapping used for every
user facing label of a Pisano flow.
"""

from typing import Dict, Mapping

LocalizedText = Dict[str, str]

ENGLISH = 'EN'

SUBMIT_TRANSLATIONS: LocalizedText = {
    'FR-CA': 'Envoyer',
    'ES-ES': 'Enviar',
    'ES': 'Enviar',
}

NPS_LOW_DESCRIPTION: LocalizedText = {
    'IR': 'من توصیه نمی کنم',
    'IT': 'Non lo consiglio',
    'AR': 'أنا لا أوصي',
    'ZH-HANS': '我不推荐',
    'JA': '私はお勧めしません',
    'ES-ES': 'No lo recomendaría',
    'KO': '나는 추천하지 않는다',
    'EN': 'I would not recommend',
    'SQ': 'Une nuk do te rekomandoja',
    'SR': 'Ne bih preporučio',
    'RU': 'Я не рекомендую',
    'FR-CA': 'Je ne recommanderais pas',
    'TR': 'Tavsiye etmem',
    'ES': 'No lo recomiendo',
    'FR': 'Je ne recommanderais pas',
    'DE': 'Ich empfehle nicht',
}

NPS_HIGH_DESCRIPTION: LocalizedText = {
    'IR': 'ن توصیه میکنم',
    'IT': 'Io consiglio',
    'AR': 'أنا أوصي',
    'ZH-HANS': '我建议',
    'JA': '私はアドバイスします',
    'ES-ES': 'Yo aconsejo',
    'KO': '나는 충고한',
    'EN': 'I would recommend',
    'SQ': 'Une do te rekomandoja',
    'SR': 'Preporučio bih',
    'RU': 'Я советую',
    'FR-CA': 'Je recommande',
    'TR': 'Tavsiye ederim',
    'ES': 'Yo aconsejo',
    'FR': 'Je recommande',
    'DE': 'Ich rate',
}


def localized(language: str, text: str) -> LocalizedText:
  return {language: text}


def merge_localized(*texts: Mapping[str, str]) -> LocalizedText:
  """Merges localized texts, later entries win for the same language."""
  merged: LocalizedText = {}
  for text in texts:
    merged.update(text)
  return merged


def submit_label(language: str) -> LocalizedText:
  """Returns the submit button label, English text under the survey language.

  The fixed translations are applied last, so a survey authored in one of
  those locales gets the translated label.
  """
  return merge_localized(localized(language, 'Submit'), SUBMIT_TRANSLATIONS)
