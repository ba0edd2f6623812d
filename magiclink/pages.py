"""
HTML rendering for the viewer and admin pages.

Templates use ``{{name}}`` placeholders instead of str.format so the
embedded CSS and JavaScript braces don't need escaping.
"""

import html
import re

from .utils import ceil_minutes

_BODY_TAG = re.compile(r"<body[^>]*>", re.IGNORECASE)


def _render(template: str, **values) -> str:
    for key, value in values.items():
        template = template.replace("{{" + key + "}}", str(value))
    return template


EXPIRED_TEMPLATE = """<!DOCTYPE html>
<html><head>
<meta charset="utf-8"><title>Link Expired - {{brand}}</title>
<style>
  *{margin:0;padding:0;box-sizing:border-box}
  body{min-height:100vh;display:flex;align-items:center;justify-content:center;
    background:#04101E;font-family:Inter,sans-serif;color:#fff}
  .box{text-align:center;padding:48px;border-radius:16px;
    background:rgba(255,255,255,0.04);border:1px solid rgba(255,255,255,0.08);
    max-width:440px}
  h1{font-size:22px;margin-bottom:12px;color:#e74c3c}
  p{font-size:15px;opacity:0.7;line-height:1.6}
  .logo{font-size:28px;font-weight:800;margin-bottom:24px;color:#00c6ff}
</style>
</head><body>
<div class="box">
  <div class="logo">{{brand}}</div>
  <h1>{{message}}</h1>
  <p>This preview link is no longer available.<br>
  Contact the sender for a new link.</p>
</div>
</body></html>"""


BANNER_TEMPLATE = """
<div id="magic-link-banner" style="
  position:fixed; top:0; left:0; right:0; z-index:99999;
  background:linear-gradient(90deg,#0072ff,#00c6ff);
  color:#fff; text-align:center; padding:8px 16px;
  font-family:Inter,sans-serif; font-size:13px;
  box-shadow:0 2px 8px rgba(0,0,0,0.3);
">
  Preview link - expires in ~{{minutes}} min&nbsp;|&nbsp;
  <span style="opacity:0.7">Shared by {{brand}}</span>
  <script>
    (function(){
      var exp = {{expires_at}};
      var el = document.getElementById('magic-link-banner');
      setInterval(function(){
        var left = exp - Date.now();
        if(left <= 0){
          el.innerHTML = '<b>This preview link has expired.</b>';
          el.style.background = '#c0392b';
        } else {
          el.innerHTML = 'Preview link - expires in ~' + Math.ceil(left/60000)
            + ' min | <span style="opacity:0.7">Shared by {{brand}}</span>';
        }
      }, 30000);
    })();
  </script>
</div>
<div style="height:36px"></div>
"""


ADMIN_TEMPLATE = """<!DOCTYPE html>
<html><head>
<meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1">
<title>{{brand}} Magic Link Admin</title>
<style>
  *{margin:0;padding:0;box-sizing:border-box}
  body{min-height:100vh;background:#04101E;font-family:Inter,sans-serif;color:#fff;
    display:flex;flex-direction:column;align-items:center;padding:48px 20px}
  .container{width:100%;max-width:500px}
  .header{text-align:center;margin-bottom:40px}
  .logo{font-size:32px;font-weight:800;color:#00c6ff;margin-bottom:6px}
  .sub{font-size:14px;opacity:0.45}
  .card{background:rgba(255,255,255,0.03);border:1px solid rgba(255,255,255,0.07);
    border-radius:16px;padding:28px;margin-bottom:20px}
  .card h3{font-size:16px;margin-bottom:16px}
  label{display:block;font-size:12px;font-weight:600;opacity:0.5;margin:18px 0 6px;
    text-transform:uppercase}
  input,select{width:100%;padding:11px 14px;border-radius:10px;
    border:1px solid rgba(255,255,255,0.1);background:rgba(255,255,255,0.05);
    color:#fff;font-size:14px}
  select option{background:#0a1929}
  button{cursor:pointer;font-weight:600;border-radius:8px;color:#fff}
  .btn-primary{width:100%;margin-top:22px;padding:12px 24px;border:none;
    background:linear-gradient(135deg,#0072ff,#00c6ff)}
  .btn-secondary{padding:9px 20px;background:rgba(255,255,255,0.06);
    border:1px solid rgba(255,255,255,0.1)}
  .result{margin-top:18px;padding:16px;background:rgba(0,114,255,0.08);
    border-radius:12px;word-break:break-all;display:none}
  .result a{color:#00c6ff}
  .exp,.meta{font-size:11px;opacity:0.4;margin-top:6px}
  .link-item{padding:14px 16px;border:1px solid rgba(255,255,255,0.06);border-radius:12px;
    margin-top:10px;font-size:13px;display:flex;justify-content:space-between;align-items:center}
  .link-item .label{font-weight:700;color:#00c6ff}
  .copy-btn,.revoke-btn{padding:6px 14px;font-size:12px;background:none}
  .copy-btn{border:1px solid rgba(0,114,255,0.25);color:#00c6ff}
  .revoke-btn{border:1px solid rgba(231,76,60,0.25);color:#e74c3c}
  .error{color:#e74c3c}
  .empty-state{text-align:center;padding:20px;opacity:0.3;font-size:13px}
</style>
</head><body>
<div class="container">
  <div class="header">
    <div class="logo">{{brand}}</div>
    <p class="sub">Magic Link Admin</p>
  </div>

  <div class="card">
    <h3>Generate New Link</h3>
    <label for="secret">Admin Secret</label>
    <input type="password" id="secret" placeholder="Enter admin secret">
    <label for="label">Client / Label</label>
    <input type="text" id="label" placeholder="e.g. Acme Corp Demo">
    <label for="ttl">Expires in</label>
    <select id="ttl">
      <option value="30">30 minutes</option>
      <option value="60">1 hour</option>
      <option value="120" selected>2 hours</option>
      <option value="240">4 hours</option>
      <option value="480">8 hours</option>
      <option value="1440">24 hours</option>
    </select>
    <button class="btn-primary" onclick="generate()">Generate Magic Link</button>
    <div class="result" id="result"></div>
  </div>

  <div class="card">
    <h3>Active Links</h3>
    <button class="btn-secondary" onclick="loadLinks()">Refresh Links</button>
    <div id="links-list"><p class="empty-state">Click refresh to load active links</p></div>
  </div>
</div>

<script>
function esc(s){
  return String(s).replace(/[&<>"']/g, function(c){
    return {'&':'&amp;','<':'&lt;','>':'&gt;','"':'&quot;',"'":'&#39;'}[c];
  });
}
function getSecret(){ return document.getElementById('secret').value; }
function post(path, body){
  body.secret = getSecret();
  return fetch(path, {method:'POST', headers:{'Content-Type':'application/json'}, body:JSON.stringify(body)});
}

async function generate(){
  const btn = document.querySelector('.btn-primary');
  btn.textContent = 'Generating...';
  btn.disabled = true;
  try {
    const res = await post('/api/generate', {
      label: document.getElementById('label').value,
      ttlMinutes: parseInt(document.getElementById('ttl').value)
    });
    const data = await res.json();
    const el = document.getElementById('result');
    el.style.display = 'block';
    if(res.ok){
      el.innerHTML = '<a href="'+esc(data.url)+'" target="_blank">'+esc(data.url)+'</a>'
        + '<div class="exp">Expires: '+esc(data.expiresAt)+' ('+esc(data.ttlMinutes)+' min)</div>';
    } else {
      el.innerHTML = '<span class="error">'+esc(data.detail)+'</span>';
    }
  } finally {
    btn.textContent = 'Generate Magic Link';
    btn.disabled = false;
  }
}

async function loadLinks(){
  const res = await post('/api/links', {});
  const data = await res.json();
  const el = document.getElementById('links-list');
  if(!res.ok){ el.innerHTML = '<p class="error empty-state">'+esc(data.detail)+'</p>'; return; }
  if(!data.activeLinks.length){ el.innerHTML = '<p class="empty-state">No active links</p>'; return; }
  el.innerHTML = data.activeLinks.map(function(l){
    return '<div class="link-item"><div>'
      + '<div class="label">'+esc(l.label)+'</div>'
      + '<div class="meta">'+l.remainingMinutes+' min left - '+l.accessCount+' views</div>'
      + '</div><div>'
      + '<button class="copy-btn" data-token="'+esc(l.token)+'" onclick="copyLink(this)">Copy</button> '
      + '<button class="revoke-btn" data-token="'+esc(l.token)+'" onclick="revoke(this)">Revoke</button>'
      + '</div></div>';
  }).join('');
}

function copyLink(btn){
  navigator.clipboard.writeText(location.origin + '/view/' + btn.dataset.token);
}

async function revoke(btn){
  await post('/api/revoke', {token: btn.dataset.token});
  loadLinks();
}
</script>
</body></html>"""


def expired_page(message: str, brand: str) -> str:
    return _render(EXPIRED_TEMPLATE, brand=html.escape(brand), message=html.escape(message))


def admin_page(brand: str) -> str:
    return _render(ADMIN_TEMPLATE, brand=html.escape(brand))


def inject_banner(page: str, expires_at: int, remaining_ms: int, brand: str) -> str:
    """Insert the expiry banner right after the page's opening <body> tag.

    Pages without a <body> tag are returned unchanged.
    """
    banner = _render(
        BANNER_TEMPLATE,
        minutes=ceil_minutes(remaining_ms),
        expires_at=int(expires_at),
        brand=html.escape(brand),
    )
    return _BODY_TAG.sub(lambda m: m.group(0) + banner, page, count=1)
