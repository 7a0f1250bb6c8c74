"""Example documents under test.

The document holds a panel whose content is loaded lazily when its
anchor is clicked. The anchor addresses the panel through its logical
selector `#panel`, reported by the page in the `target` detail key
once the content has been injected.
"""

PAGE_URL = 'http://localhost/index.html'

DOCUMENT = '''
<nav>
  <a id="open" href="#" data-target="#panel">Open panel</a>
</nav>
<main>
  <section id="panel"></section>
  <section id="orphan"></section>
</main>
'''

#: Detail reported once `#panel` has received its content.
PANEL_LOADED = {'target': '#panel'}

#: Document with anchors addressing the panel through an invalid
#: selector, another element and a structural selector.
ANCHORS_DOCUMENT = '''
<nav>
  <a href="#" data-target="[[">Broken</a>
  <a href="#" data-target="#orphan">Orphan</a>
  <a href="#" data-target="main > section:first-child">Panel</a>
</nav>
<main>
  <section id="panel"></section>
  <section id="orphan"></section>
</main>
'''

#: Document injecting the panel content shortly after its anchor is
#: clicked, then reporting the panel logical selector.
LAZY_DOCUMENT = '''
<nav>
  <a id="open" href="#" data-target="#panel">Open panel</a>
</nav>
<main>
  <section id="panel"></section>
</main>
<script>
  const anchor = document.getElementById('open');
  anchor.addEventListener('click', (event) => {
    event.preventDefault();
    const target = anchor.getAttribute('data-target');
    setTimeout(() => {
      document.querySelector(target).innerHTML = '<p>X</p>';
      document.dispatchEvent(new CustomEvent('load', {detail: {target}}));
    }, 50);
  });
</script>
'''
