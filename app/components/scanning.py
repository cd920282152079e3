# app/components/scanning.py
import streamlit.components.v1 as components

SCAN_SECONDS = 2

_OVERLAY_TEMPLATE = """
<style>
  .aura-scan {{ position: relative; width: 256px; height: 256px; margin: 0 auto; border-radius: 50%;
    overflow: hidden; border: 4px solid #292524; box-shadow: 0 20px 40px rgba(0,0,0,.25); }}
  .aura-scan img {{ width: 100%; height: 100%; object-fit: cover; filter: grayscale(1) contrast(1.25); }}
  .aura-scan .tint {{ position: absolute; inset: 0; background: rgba(16,185,129,.2); }}
  .aura-scan .grid {{ position: absolute; inset: 0; opacity: .3; background-size: 20px 20px;
    background-image: linear-gradient(rgba(0,255,170,.5) 1px, transparent 1px),
                      linear-gradient(90deg, rgba(0,255,170,.5) 1px, transparent 1px); }}
  .aura-scan .line {{ position: absolute; left: 0; right: 0; height: 4px; background: #34d399;
    box-shadow: 0 0 15px rgba(52,211,153,1); animation: auraScan {seconds}s linear infinite; }}
  @keyframes auraScan {{
    0% {{ top: 0%; opacity: 0; }}
    10% {{ opacity: 1; }}
    90% {{ opacity: 1; }}
    100% {{ top: 100%; opacity: 0; }}
  }}
</style>
<div class="aura-scan">
  <img src="{image}" alt="Scanning">
  <div class="tint"></div>
  <div class="grid"></div>
  <div class="line"></div>
</div>
"""


def scanning_html(image_url: str, seconds: int = SCAN_SECONDS) -> str:
    return _OVERLAY_TEMPLATE.format(image=image_url, seconds=seconds)


def render_scanning_overlay(image_url: str):
    components.html(scanning_html(image_url), height=280)
