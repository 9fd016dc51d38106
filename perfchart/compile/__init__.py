from .frame_batch import FrameBatch, compile_frame_batch

__all__ = ["FrameBatch", "compile_frame_batch"]
