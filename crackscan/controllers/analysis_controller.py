"""Контроллер сеанса анализа: состояние вызывающего слоя и вызов чистого конвейера.

SOLID:
- SRP: класс хранит состояние сеанса (Idle → Uploading → Analyzing → Displaying)
  и не содержит логики обработки изображений.
- DIP: зависит от сервисов как от ролей; конкретные реализации подставляются.
Clean Code:
- Конвейер остаётся чистой функцией; всё изменяемое состояние живёт здесь.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from PIL import Image

from crackscan.models.analysis_model import AnalysisResult
from crackscan.services.analysis_service import AnalysisService
from crackscan.services.image_service import ImageService

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    ANALYZING = "analyzing"
    DISPLAYING = "displaying"


@dataclass
class AnalysisController:
    """Связывает слой представления с конвейером анализа.

    Ответственности:
    - Переходы состояний сеанса и уведомление через `on_state_change`.
    - Преобразование изображения PIL в буфер через `ImageService`.
    - Запуск анализа через `AnalysisService` и хранение последнего результата.
    """
    on_state_change: Optional[Callable[[SessionState], None]] = None

    _image_service: ImageService = field(default_factory=ImageService)
    _analysis_service: AnalysisService = field(default_factory=AnalysisService)
    _state: SessionState = SessionState.IDLE
    _source_image: Optional[Image.Image] = None
    _result: Optional[AnalysisResult] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def source_image(self) -> Optional[Image.Image]:
        return self._source_image

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self._result

    def begin_upload(self) -> None:
        """Пользователь выбирает файл; предыдущий результат остаётся до нового анализа."""
        self._set_state(SessionState.UPLOADING)

    def submit_image(self, image: Image.Image) -> AnalysisResult:
        """Принимает декодированное изображение и выполняет анализ.

        Исходное изображение сохраняется для показа и не изменяется.

        Raises:
            InvalidInputError: если изображение не удалось привести к корректному буферу;
                контроллер при этом возвращается в состояние Idle.
        """
        self._source_image = image
        self._set_state(SessionState.ANALYZING)
        try:
            buffer = self._image_service.buffer_from_image(image)
            result = self._analysis_service.run(buffer, buffer.width, buffer.height)
        except Exception:
            self._source_image = None
            self._result = None
            self._set_state(SessionState.IDLE)
            raise
        self._result = result
        self._set_state(SessionState.DISPLAYING)
        return result

    def export_image(self) -> Optional[Image.Image]:
        """Размеченное изображение для скачивания; кодирование в файл делает вызывающий."""
        if self._result is None:
            return None
        return self._image_service.image_from_buffer(self._result.annotated)

    def reset(self) -> None:
        self._source_image = None
        self._result = None
        self._set_state(SessionState.IDLE)

    # ---- Helpers ----
    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        logger.debug(f"Session state {self._state.value} -> {state.value}")
        self._state = state
        if self.on_state_change is not None:
            self.on_state_change(state)
