"""
Page hierarchy: parent validation and tree building.

The hierarchy is handled as an arena of pages keyed by id with parent
pointers, loaded with one query per project.
"""


class HierarchyError(ValueError):
    pass


def parent_map(project):
    """{page_id: parent_page_id} for every page of `project`."""
    from .models import Page

    return dict(Page.objects.filter(project=project).values_list('id', 'parent_page_id'))


def validate_parent(project, page_id, parent):
    """
    Check that `parent` may become the parent of page `page_id` in `project`.

    `page_id` is None for a page that does not exist yet. Raises
    HierarchyError when the parent belongs to another project, is the page
    itself, or sits below the page (which would close a cycle).
    """
    if parent is None:
        return

    if parent.project_id != project.pk:
        raise HierarchyError('Parent page must belong to the same project.')

    if page_id is None:
        return

    if parent.pk == page_id:
        raise HierarchyError('A page cannot be its own parent.')

    parents = parent_map(project)
    seen = set()
    cursor = parent.pk
    while cursor is not None and cursor not in seen:
        if cursor == page_id:
            raise HierarchyError('Parent page would create a cycle in the page hierarchy.')
        seen.add(cursor)
        cursor = parents.get(cursor)


def build_page_tree(pages):
    """
    Nest `pages` under their parents.

    Returns a list of root nodes, each {page_id, title, url_slug,
    is_pillar_page, children: [...]}, pillar pages first, then by title.
    Pages whose parent is not among `pages` are treated as roots.
    """
    nodes = {}
    for page in pages:
        nodes[page.pk] = {
            'page_id': str(page.pk),
            'title': page.title,
            'url_slug': page.url_slug,
            'is_pillar_page': page.is_pillar_page,
            'children': [],
        }

    roots = []
    for page in pages:
        node = nodes[page.pk]
        parent_node = nodes.get(page.parent_page_id)
        if parent_node is not None and page.parent_page_id != page.pk:
            parent_node['children'].append(node)
        else:
            roots.append(node)

    def sort_key(node):
        return (not node['is_pillar_page'], node['title'].lower())

    def sort_children(children):
        children.sort(key=sort_key)
        for child in children:
            sort_children(child['children'])

    sort_children(roots)
    return roots
