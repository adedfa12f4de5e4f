"""
手势弓箭演示 - 主入口
Hand Tracking Bow Demo
"""
import argparse
import sys

import pygame

from game.camera import HandLandmarkSource, MouseLandmarkSource
from game.camera_adapter import CameraAutoDetect, create_camera
from game.config import BowConfig, HandConfig, ViewConfig
from game.loop import FrameLoop
from game.renderer import PygameRenderer

# 蓄力定时器事件
CHARGE_TICK = pygame.USEREVENT + 1


class BowDemo:
    def __init__(self, camera_source="auto", rtsp_url=None, device_id=0,
                 bow: BowConfig = None, view: ViewConfig = None):
        pygame.init()
        self.bow = bow or BowConfig()
        self.view = view or ViewConfig()

        self.screen = pygame.display.set_mode((self.view.width, self.view.height), pygame.RESIZABLE)
        pygame.display.set_caption("手势弓箭 | Hand Tracking Bow")
        self.clock = pygame.time.Clock()

        self.renderer = PygameRenderer(self.screen, self.view, self.bow.max_power)
        self.loop = FrameLoop(self.renderer, self.bow)
        self.mouse = MouseLandmarkSource(self.screen.get_size())

        self.camera = None
        self.hands = None
        self._last_frame_id = 0
        if camera_source != "mouse":
            self._init_camera(camera_source, rtsp_url, device_id)

        if self.camera:
            self.renderer.status = "食指定位，拇指定向 | 空格蓄力，松开放箭"
        else:
            self._use_mouse()

        pygame.time.set_timer(CHARGE_TICK, self.bow.charge_interval_ms)
        self.running = False

    def _use_mouse(self):
        print("🖱️  鼠标控制模式", flush=True)
        self.renderer.status = "鼠标瞄准 | 空格蓄力，松开放箭"

    def _init_camera(self, camera_source, rtsp_url, device_id):
        print("\n🔍 初始化摄像头...", flush=True)
        print(f"   模式: {camera_source}", flush=True)

        if camera_source == "rtsp":
            self.camera = create_camera("rtsp", rtsp_url=rtsp_url or "")
        elif camera_source == "usb":
            self.camera = create_camera("usb", device_id=device_id)
        else:
            self.camera = create_camera(camera_source)

        if not self.camera:
            print("⚠️ 没有可用摄像头，回退到鼠标模式", flush=True)
            return

        self.hands = HandLandmarkSource(
            HandConfig(),
            frame_interval_ms=1000 // self.camera.config.fps,
            on_result=self.loop.deliver_landmarks,
        )
        if not self.hands.available:
            print("⚠️ 手势识别不可用，回退到鼠标模式", flush=True)
            self._drop_camera()

    def _drop_camera(self):
        if self.hands:
            self.hands.close()
        if self.camera:
            self.camera.stop()
        self.camera = None
        self.hands = None
        self.renderer.set_preview(None)

    def poll_landmarks(self):
        """把新画面交给手势检测；没有新画面时不做检测"""
        if self.camera is None:
            self.loop.deliver_landmarks(self.mouse.detect(pygame.mouse.get_pos()))
            return

        if not self.camera.is_active():
            print("⚠️ 摄像头画面中断，回退到鼠标模式", flush=True)
            self._drop_camera()
            self._use_mouse()
            return

        frame_id, frame = self.camera.get_latest()
        if frame_id == self._last_frame_id:
            return
        self._last_frame_id = frame_id
        self.hands.submit(frame)
        self.renderer.set_preview(frame)

    def handle_event(self, event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == CHARGE_TICK:
            self.loop.charge_tick()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.key == pygame.K_SPACE:
                self.loop.trigger_press()
            elif event.key == pygame.K_r:
                self.loop.simulator.clear()
        elif event.type == pygame.KEYUP:
            if event.key == pygame.K_SPACE:
                self.loop.trigger_release()
        elif event.type == pygame.VIDEORESIZE:
            self.renderer.resize(event.w, event.h)
            self.mouse.resize(event.w, event.h)

    def run(self):
        """主循环"""
        self.running = True
        try:
            while self.running:
                self.clock.tick(self.view.fps)
                for event in pygame.event.get():
                    self.handle_event(event)
                self.poll_landmarks()
                self.loop.step()
        finally:
            pygame.time.set_timer(CHARGE_TICK, 0)
            self._drop_camera()
            pygame.quit()


def list_cameras(rtsp_url=None):
    print("🔍 检测可用摄像头...\n")
    usb_cams = CameraAutoDetect.detect_usb_cameras()
    print(f"USB 摄像头: {len(usb_cams)} 个")
    for cam in usb_cams:
        print(f"  /dev/video{cam['id']}: {cam['resolution']}")

    if rtsp_url:
        print(f"\nRTSP 流测试: {rtsp_url} ", end="", flush=True)
        print("✅ 可用" if CameraAutoDetect.test_rtsp(rtsp_url, timeout=3.0) else "❌ 不可用")


def main(argv=None):
    parser = argparse.ArgumentParser(description='手势弓箭演示')
    parser.add_argument('--camera', '-c', choices=['auto', 'usb', 'rtsp', 'mouse'],
                        default='auto', help='摄像头源 (默认: auto)')
    parser.add_argument('--rtsp-url', '-u', type=str,
                        help='RTSP 流地址 (例如: rtsp://user:pass@ip:554/stream)')
    parser.add_argument('--device', '-d', type=int, default=0, help='USB 摄像头编号')
    parser.add_argument('--list', '-l', action='store_true', help='列出可用摄像头并退出')
    parser.add_argument('--max-power', type=float, default=BowConfig.max_power, help='最大蓄力')
    parser.add_argument('--fps', type=int, default=ViewConfig.fps, help='渲染帧率')
    args = parser.parse_args(argv)

    if args.list:
        list_cameras(args.rtsp_url)
        return 0

    print("\n🏹 启动手势弓箭...")
    print("=" * 40)
    print("控制方式:")
    print("  摄像头: 食指指尖定位弓，拇指指尖决定方向")
    print("  鼠标:   弓固定在左下方，朝向鼠标")
    print("  空格:   按住蓄力，松开放箭   R: 清空   Esc: 退出")
    print("=" * 40)

    demo = BowDemo(
        camera_source=args.camera,
        rtsp_url=args.rtsp_url,
        device_id=args.device,
        bow=BowConfig(max_power=args.max_power),
        view=ViewConfig(fps=args.fps),
    )
    demo.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
