# schedconsole/web/ui.py
def ui_html() -> str:
    return r"""
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width,initial-scale=1" />
  <title>Scheduler Console</title>
  <script src="https://cdn.tailwindcss.com"></script>
  <style>
    :root { color-scheme: dark; }
    .t-12 { font-size: 12px; line-height: 18px; }
    .t-14 { font-size: 14px; line-height: 20px; }
    .t-18 { font-size: 18px; line-height: 26px; }
    .t-26 { font-size: 26px; line-height: 34px; }
    .result { white-space: pre-wrap; font-family: ui-monospace, monospace; }
    .result.success { color: rgb(167 243 208); }
    .result.error { color: rgb(253 164 175); }
    .result.info { color: rgb(186 230 253); }
    .status-box { width: 32px; height: 32px; border-radius: 8px; display: flex; align-items: center; justify-content: center; }
    .status-box.empty { background: rgb(39 39 42); }
    .status-box.healthy { background: rgba(16,185,129,0.35); }
    .status-box.unhealthy { background: rgba(244,63,94,0.35); }
    button:disabled { opacity: 0.4; cursor: not-allowed; }
  </style>
</head>

<body class="min-h-screen bg-zinc-950 text-zinc-50 antialiased">
  <div class="w-full max-w-none px-4 sm:px-6 lg:px-10 py-6 space-y-6">

    <header class="flex flex-col lg:flex-row lg:items-center justify-between gap-4">
      <div>
        <div class="t-26 font-semibold tracking-tight">Scheduler Console</div>
        <div class="t-14 text-zinc-400">Authenticate • Configure strategies • Observe health and metrics</div>
      </div>
      <div class="flex items-center gap-3">
        <div class="inline-flex items-center gap-2 rounded-2xl bg-zinc-900/60 ring-1 ring-zinc-800 px-3 py-2">
          <span id="authDot" class="h-2 w-2 rounded-full bg-rose-400"></span>
          <span id="authText" class="t-14 text-zinc-200">Not Authenticated</span>
        </div>
        <button id="authBtn" class="rounded-2xl bg-emerald-500/15 px-4 py-2 t-14 ring-1 ring-emerald-500/25">Get Token</button>
      </div>
    </header>
    <div id="result-auth" class="result t-12"></div>

    <!-- Auth modal -->
    <div id="authModal" class="hidden rounded-3xl border border-zinc-800/70 bg-zinc-900/40 p-6 space-y-4">
      <div class="flex gap-2">
        <button class="auth-tab rounded-xl px-3 py-1 t-14 ring-1 ring-zinc-700" data-tab="password">Username / Password</button>
        <button class="auth-tab rounded-xl px-3 py-1 t-14 ring-1 ring-zinc-700" data-tab="publicKey">Public Key</button>
        <button id="authClose" class="ml-auto t-14 text-zinc-400">Close</button>
      </div>
      <form id="passwordAuthForm" class="space-y-2">
        <input id="username" placeholder="username" class="w-full bg-zinc-950/60 ring-1 ring-zinc-800 rounded-xl px-3 py-2 t-14" />
        <input id="password" type="password" placeholder="password" class="w-full bg-zinc-950/60 ring-1 ring-zinc-800 rounded-xl px-3 py-2 t-14" />
        <button class="rounded-xl bg-emerald-500/15 px-4 py-2 t-14 ring-1 ring-emerald-500/25">Login</button>
      </form>
      <form id="publicKeyAuthForm" class="space-y-2 hidden">
        <textarea id="publicKey" rows="8" class="w-full bg-zinc-950/60 ring-1 ring-zinc-800 rounded-xl px-3 py-2 t-12 font-mono"></textarea>
        <div class="flex gap-2">
          <button class="rounded-xl bg-emerald-500/15 px-4 py-2 t-14 ring-1 ring-emerald-500/25">Get Token</button>
          <button type="button" id="fillSample" class="rounded-xl px-4 py-2 t-14 ring-1 ring-zinc-700">Fill sample key</button>
        </div>
      </form>
    </div>

    <section class="grid grid-cols-1 lg:grid-cols-2 gap-6">
      <!-- Health -->
      <div class="rounded-3xl border border-zinc-800/70 bg-zinc-900/30 p-6 space-y-3">
        <div class="t-18 font-semibold">Service Health</div>
        <div class="flex items-center gap-2">
          <button id="btnHealth" class="rounded-xl px-3 py-2 t-14 ring-1 ring-zinc-700">Check Health</button>
          <input id="healthInterval" type="number" min="1" class="w-20 bg-zinc-950/60 ring-1 ring-zinc-800 rounded-xl px-2 py-2 t-14" />
          <span class="t-12 text-zinc-500">seconds</span>
          <button id="healthAutoBtn" class="rounded-xl px-3 py-2 t-14 ring-1 ring-zinc-700">Start Auto-refresh</button>
        </div>
        <div id="healthGrid" class="flex gap-2"></div>
        <div id="result-health" class="result t-12 max-h-64 overflow-auto"></div>
      </div>

      <!-- Metrics -->
      <div class="rounded-3xl border border-zinc-800/70 bg-zinc-900/30 p-6 space-y-3">
        <div class="t-18 font-semibold">Scheduler Metrics</div>
        <div class="flex items-center gap-2">
          <button id="btnMetrics" class="auth-required rounded-xl px-3 py-2 t-14 ring-1 ring-zinc-700">Get Metrics</button>
          <input id="metricsInterval" type="number" min="1" class="w-20 bg-zinc-950/60 ring-1 ring-zinc-800 rounded-xl px-2 py-2 t-14" />
          <span class="t-12 text-zinc-500">seconds</span>
          <button id="metricsAutoBtn" class="auth-required rounded-xl px-3 py-2 t-14 ring-1 ring-zinc-700">Start Auto-refresh</button>
        </div>
        <div id="result-metrics" class="result t-12 max-h-64 overflow-auto"></div>
      </div>

      <!-- Pods -->
      <div class="rounded-3xl border border-zinc-800/70 bg-zinc-900/30 p-6 space-y-3">
        <div class="t-18 font-semibold">Pod / PID Mapping</div>
        <button id="btnPods" class="auth-required rounded-xl px-3 py-2 t-14 ring-1 ring-zinc-700">Get Pod PIDs</button>
        <div id="result-pod_pids" class="result t-12 max-h-64 overflow-auto"></div>
      </div>

      <!-- Strategies -->
      <div class="rounded-3xl border border-zinc-800/70 bg-zinc-900/30 p-6 space-y-3">
        <div class="t-18 font-semibold">Scheduling Strategies</div>
        <div class="flex flex-wrap gap-2">
          <button id="btnGetStrategies" class="auth-required rounded-xl px-3 py-2 t-14 ring-1 ring-zinc-700">Get Strategies</button>
          <button id="btnAddStrategy" class="rounded-xl px-3 py-2 t-14 ring-1 ring-zinc-700">Add Strategy</button>
          <button id="btnClearStrategies" class="rounded-xl px-3 py-2 t-14 ring-1 ring-zinc-700">Clear All</button>
          <button id="btnSaveStrategies" class="auth-required rounded-xl bg-emerald-500/15 px-3 py-2 t-14 ring-1 ring-emerald-500/25">Save All Strategies</button>
        </div>
        <div id="strategiesContainer" class="space-y-3"></div>
        <div id="result-strategies" class="result t-12 max-h-64 overflow-auto"></div>
      </div>
    </section>
  </div>

<script>
const $ = (id) => document.getElementById(id);
let intervalsLoaded = false;

async function call(method, path, body) {
  const opts = { method, headers: { 'Content-Type': 'application/json' } };
  if (body !== undefined) opts.body = JSON.stringify(body);
  const r = await fetch(path, opts);
  const data = await r.json();
  if (!r.ok) throw new Error(data.detail || ('HTTP ' + r.status));
  return data;
}

function renderPanels(panels) {
  for (const [name, res] of Object.entries(panels)) {
    const el = $('result-' + name);
    if (!el) continue;
    el.textContent = res.message;
    el.className = 'result t-12 max-h-64 overflow-auto ' + res.status;
  }
}

function renderGrid(slots) {
  const grid = $('healthGrid');
  grid.innerHTML = '';
  for (const s of slots) {
    const box = document.createElement('div');
    box.className = 'status-box ' + s.state;
    box.textContent = s.glyph;
    box.title = s.title;
    grid.appendChild(box);
  }
}

function renderPolling(kind, p) {
  const btn = $(kind + 'AutoBtn');
  const input = $(kind + 'Interval');
  btn.textContent = p.button_label;
  input.disabled = p.input_disabled;
  if (!intervalsLoaded || p.active) input.value = p.interval_s;
}

function renderState(st, withStrategies) {
  $('authText').textContent = st.auth.status_text;
  $('authBtn').textContent = st.auth.button_label;
  $('authDot').className = 'h-2 w-2 rounded-full ' + (st.auth.authenticated ? 'bg-emerald-400' : 'bg-rose-400');
  document.querySelectorAll('.auth-required').forEach(el => { el.disabled = !st.auth_required_enabled; });
  renderPanels(st.panels);
  renderGrid(st.health_grid);
  renderPolling('health', st.polling.health);
  renderPolling('metrics', st.polling.metrics);
  intervalsLoaded = true;
  if (withStrategies) renderStrategies(st.strategies);
}

function field(label, input) {
  const wrap = document.createElement('label');
  wrap.className = 'block t-12 text-zinc-400 space-y-1';
  wrap.append(label, input);
  return wrap;
}

function textInput(value, placeholder, onChange) {
  const i = document.createElement('input');
  i.value = value;
  i.placeholder = placeholder;
  i.className = 'w-full bg-zinc-950/60 ring-1 ring-zinc-800 rounded-xl px-2 py-1 t-14 text-zinc-100';
  i.addEventListener('change', () => onChange(i.value));
  return i;
}

function renderStrategies(strategies) {
  const c = $('strategiesContainer');
  c.innerHTML = '';
  for (const s of strategies) {
    const card = document.createElement('div');
    card.className = 'strategy-item rounded-2xl ring-1 ring-zinc-800 p-4 space-y-2';

    const head = document.createElement('div');
    head.className = 'flex items-center justify-between';
    head.innerHTML = '<span class="t-14 font-semibold"></span>';
    head.firstChild.textContent = s.title;
    const rm = document.createElement('button');
    rm.textContent = 'Remove';
    rm.className = 't-12 text-rose-300';
    rm.onclick = () => act('DELETE', '/strategies/' + s.id, undefined, true);
    head.appendChild(rm);
    card.appendChild(head);

    const prio = document.createElement('input');
    prio.type = 'checkbox';
    prio.checked = s.priority;
    prio.onchange = () => patch(s.id, { priority: prio.checked });
    card.appendChild(field('Priority', prio));
    card.appendChild(field('Execution Time (nanoseconds)', textInput(s.execution_time, '20000000', v => patch(s.id, { execution_time: v }))));
    card.appendChild(field('PID (optional)', textInput(s.pid, 'Process ID', v => patch(s.id, { pid: v }))));
    card.appendChild(field('Command Regex (optional)', textInput(s.command_regex, 'nr-gnb|ping', v => patch(s.id, { command_regex: v }))));

    const sels = document.createElement('div');
    sels.className = 'space-y-1';
    s.selectors.forEach((sel, idx) => {
      const row = document.createElement('div');
      row.className = 'selector flex gap-2';
      row.append(
        textInput(sel.key, 'key', v => act('PATCH', `/strategies/${s.id}/selectors/${idx}`, { key: v })),
        textInput(sel.value, 'value', v => act('PATCH', `/strategies/${s.id}/selectors/${idx}`, { value: v })),
      );
      const del = document.createElement('button');
      del.textContent = 'Remove';
      del.className = 't-12 text-zinc-400';
      del.onclick = () => act('DELETE', `/strategies/${s.id}/selectors/${idx}`, undefined, true);
      row.appendChild(del);
      sels.appendChild(row);
    });
    card.appendChild(field('Label Selectors', sels));

    const addSel = document.createElement('button');
    addSel.textContent = 'Add Selector';
    addSel.className = 't-12 text-emerald-300';
    addSel.onclick = () => act('POST', `/strategies/${s.id}/selectors`, undefined, true);
    card.appendChild(addSel);

    c.appendChild(card);
  }
}

async function act(method, path, body, withStrategies) {
  try {
    const out = await call(method, path, body);
    renderState(out.state || out, !!withStrategies);
    return out;
  } catch (e) {
    console.error(e);
  }
}

function patch(id, body) { return act('PATCH', '/strategies/' + id, body); }

async function refresh() {
  try { renderState(await call('GET', '/state'), false); } catch (e) { console.error(e); }
}

function switchAuthTab(tab) {
  $('passwordAuthForm').classList.toggle('hidden', tab !== 'password');
  $('publicKeyAuthForm').classList.toggle('hidden', tab !== 'publicKey');
}

document.addEventListener('DOMContentLoaded', async () => {
  document.querySelectorAll('.auth-tab').forEach(b => b.onclick = () => switchAuthTab(b.dataset.tab));
  $('authClose').onclick = () => $('authModal').classList.add('hidden');

  $('authBtn').onclick = async () => {
    const st = await call('GET', '/state');
    if (st.auth.authenticated) {
      await act('POST', '/auth/clear');
    } else {
      $('authModal').classList.remove('hidden');
    }
  };

  $('passwordAuthForm').addEventListener('submit', async (e) => {
    e.preventDefault();
    const out = await act('POST', '/auth/password', { username: $('username').value, password: $('password').value });
    if (out && out.result.status === 'success') $('authModal').classList.add('hidden');
  });
  $('publicKeyAuthForm').addEventListener('submit', async (e) => {
    e.preventDefault();
    const out = await act('POST', '/auth/public-key', { public_key: $('publicKey').value });
    if (out && out.result.status === 'success') $('authModal').classList.add('hidden');
  });
  $('fillSample').onclick = async () => { $('publicKey').value = (await call('GET', '/auth/sample-key')).public_key; };

  $('btnHealth').onclick = () => act('POST', '/health/check');
  $('healthAutoBtn').onclick = () => act('POST', '/health/auto', { interval_s: $('healthInterval').value });
  $('btnMetrics').onclick = () => act('POST', '/metrics/fetch');
  $('metricsAutoBtn').onclick = () => act('POST', '/metrics/auto', { interval_s: $('metricsInterval').value });
  $('btnPods').onclick = () => act('POST', '/pods/pids');

  $('btnGetStrategies').onclick = () => act('POST', '/strategies/fetch');
  $('btnAddStrategy').onclick = () => act('POST', '/strategies', undefined, true);
  $('btnClearStrategies').onclick = () => act('POST', '/strategies/clear', undefined, true);
  $('btnSaveStrategies').onclick = () => act('POST', '/strategies/save');

  renderState(await call('GET', '/state'), true);
  setInterval(refresh, 1000);
});
</script>
</body>
</html>
"""
