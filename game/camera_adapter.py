"""
摄像头适配器 - 支持 USB / RTSP，后台线程只保留最新一帧
"""
import threading
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

import cv2
import numpy as np

# 超过该秒数没有新帧视为断开
STALL_TIMEOUT = 3.0


class CameraSource(Enum):
    """摄像头来源类型"""
    USB = auto()
    RTSP = auto()


@dataclass
class CameraConfig:
    """摄像头配置"""
    source: CameraSource
    device_id: int = 0
    rtsp_url: str = ""
    width: int = 320
    height: int = 240
    fps: int = 30


class CameraAdapter:
    """
    通用摄像头适配器

    采集线程不断覆盖最新帧，并给每帧编号；主循环按编号判断
    是否有新帧需要做手势检测，检测频率因此与渲染帧率解耦。
    """

    def __init__(self, config: CameraConfig):
        self.config = config
        self.cap = None
        self.is_running = False
        self.capture_thread = None
        self._latest: Tuple[int, Optional[np.ndarray]] = (0, None)
        self.frame_time = 0.0

    def start(self) -> bool:
        """启动摄像头"""
        if self.config.source == CameraSource.USB:
            self.cap = cv2.VideoCapture(self.config.device_id)
            self.cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
            self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
            self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
            self.cap.set(cv2.CAP_PROP_FPS, self.config.fps)
            name = f"USB 摄像头 {self.config.device_id}"
        else:
            self.cap = cv2.VideoCapture(self.config.rtsp_url, cv2.CAP_FFMPEG)
            self.cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
            name = f"RTSP 流 {self.config.rtsp_url}"

        if not self.cap.isOpened():
            print(f"❌ 无法打开 {name}", flush=True)
            self.cap.release()
            self.cap = None
            return False

        self.is_running = True
        # 启动后留出等待第一帧的宽限期
        self.frame_time = time.time()
        self.capture_thread = threading.Thread(target=self._capture_loop, daemon=True)
        self.capture_thread.start()
        print(f"✅ {name} 已启动", flush=True)
        return True

    def _capture_loop(self):
        frame_id = 0
        while self.is_running and self.cap is not None:
            ret, frame = self.cap.read()
            if not ret:
                time.sleep(0.001)
                continue
            frame_id += 1
            # 整个元组一次性替换，读者不会看到编号和画面不一致
            self._latest = (frame_id, frame)
            self.frame_time = time.time()

    def get_latest(self) -> Tuple[int, Optional[np.ndarray]]:
        """返回 (帧编号, 帧)；还没有画面时编号为 0"""
        return self._latest

    def is_active(self) -> bool:
        """采集线程是否仍在持续出帧"""
        return self.is_running and time.time() - self.frame_time <= STALL_TIMEOUT

    def stop(self):
        """停止摄像头"""
        self.is_running = False

        if self.capture_thread:
            self.capture_thread.join(timeout=1.0)
            self.capture_thread = None

        if self.cap:
            self.cap.release()
            self.cap = None

        self._latest = (0, None)
        print("✅ 摄像头已停止", flush=True)


class CameraAutoDetect:
    """自动检测可用摄像头"""

    @staticmethod
    def detect_usb_cameras(max_id: int = 10) -> list:
        available = []
        for i in range(max_id):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                ret, _ = cap.read()
                if ret:
                    w = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
                    h = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
                    available.append({'id': i, 'resolution': f"{w}x{h}"})
            cap.release()
        return available

    @staticmethod
    def test_rtsp(url: str, timeout: float = 5.0) -> bool:
        """测试 RTSP 流是否可用"""
        cap = cv2.VideoCapture(url, cv2.CAP_FFMPEG)
        start = time.time()
        try:
            while time.time() - start < timeout:
                ret, _ = cap.read()
                if ret:
                    return True
                time.sleep(0.1)
            return False
        finally:
            cap.release()


def create_camera(source_type: str = "auto", **kwargs) -> Optional[CameraAdapter]:
    """
    创建摄像头适配器

    Args:
        source_type: "auto", "usb", "rtsp"
        **kwargs: device_id, rtsp_url, width, height, fps

    Returns:
        CameraAdapter 实例 或 None
    """
    if source_type == "auto":
        usb_cams = CameraAutoDetect.detect_usb_cameras()
        if not usb_cams:
            print("❌ 未检测到可用摄像头", flush=True)
            return None
        print(f"✅ 发现 {len(usb_cams)} 个 USB 摄像头", flush=True)
        config = CameraConfig(source=CameraSource.USB, device_id=usb_cams[0]['id'])

    elif source_type == "usb":
        config = CameraConfig(
            source=CameraSource.USB,
            device_id=kwargs.get('device_id', 0),
            width=kwargs.get('width', 320),
            height=kwargs.get('height', 240),
            fps=kwargs.get('fps', 30),
        )

    elif source_type == "rtsp":
        config = CameraConfig(source=CameraSource.RTSP, rtsp_url=kwargs.get('rtsp_url', ''))

    else:
        raise ValueError(f"未知的摄像头类型: {source_type}")

    adapter = CameraAdapter(config)
    if adapter.start():
        return adapter
    return None
